from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from esper import World

from ecs.components.grid_position import GridPosition
from ecs.components.power_up import PowerUpKind
from ecs.constants import (
    BOMB_POINTS_PER_TILE,
    BOMB_RADIUS,
    FREEZE_DURATION,
    LIGHTNING_POINTS_PER_TILE,
    MULTIPLIER_DURATION,
    MULTIPLIER_FACTOR,
    TRANSFORM_POINTS_PER_TILE,
)
from ecs.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EventBus,
)
from ecs.systems.board_ops import (
    GravityMove,
    SpawnedTile,
    clear_tiles_with_cascade,
    get_board,
    resolve_rng,
    spawnable_tile_types,
    transform_tiles_to_type,
)
from ecs.systems.power_up_lifecycle import PowerUpLifecycleSystem

logger = logging.getLogger("futurosphere.power_ups")

Position = Tuple[int, int]


@dataclass(slots=True)
class PowerUpResult:
    kind: PowerUpKind
    affected_positions: List[GridPosition] = field(default_factory=list)
    new_tiles: List[SpawnedTile] = field(default_factory=list)
    score_bonus: int = 0
    moves: List[GravityMove] = field(default_factory=list)


class PowerUpResolver:
    """Applies a power-up's board effect and reports what it touched.

    Invalid targets never raise; they produce an empty result.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
        lifecycle: PowerUpLifecycleSystem | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)
        self.lifecycle = lifecycle or PowerUpLifecycleSystem(world, event_bus)

    def apply(
        self,
        kind: PowerUpKind,
        target: Position | None = None,
        *,
        type_names: Sequence[str] | None = None,
    ) -> PowerUpResult:
        if kind == PowerUpKind.LIGHTNING:
            result = self._lightning(target, type_names)
        elif kind == PowerUpKind.TRANSFORM:
            result = self._transform(type_names)
        elif kind == PowerUpKind.BOMB:
            result = self._bomb(target, type_names)
        elif kind == PowerUpKind.MULTIPLIER:
            self.lifecycle.activate(kind, MULTIPLIER_DURATION, MULTIPLIER_FACTOR)
            result = PowerUpResult(kind=kind)
        elif kind == PowerUpKind.FREEZE:
            self.lifecycle.activate(kind, FREEZE_DURATION, 1.0)
            result = PowerUpResult(kind=kind)
        else:
            # Time boost only touches the session clock.
            result = PowerUpResult(kind=kind)
        logger.debug(
            "power-up %s affected %d cell(s), bonus %d",
            kind.value,
            len(result.affected_positions),
            result.score_bonus,
        )
        return result

    def _target_cell(self, target) -> GridPosition | None:
        """Board cell for ``target``, or None when it is malformed or off the board."""
        try:
            row, col = target
        except (TypeError, ValueError):
            return None
        if not isinstance(row, int) or not isinstance(col, int):
            return None
        cell = GridPosition(row, col)
        return cell if get_board(self.world).is_valid(cell) else None

    def _lightning(self, target: Position | None, type_names: Sequence[str] | None) -> PowerUpResult:
        board = get_board(self.world)
        if target is None:
            row = self.rng.randrange(board.rows)
        else:
            cell = self._target_cell(target)
            if cell is None:
                return PowerUpResult(kind=PowerUpKind.LIGHTNING)
            row = cell.row
        positions = [(row, col) for col in range(board.cols)]
        return self._clear(PowerUpKind.LIGHTNING, positions, LIGHTNING_POINTS_PER_TILE, type_names)

    def _bomb(self, target: Position | None, type_names: Sequence[str] | None) -> PowerUpResult:
        board = get_board(self.world)
        cell = self._target_cell(target)
        if cell is None:
            return PowerUpResult(kind=PowerUpKind.BOMB)
        origin_row, origin_col = cell
        positions: List[Position] = []
        for r in range(origin_row - BOMB_RADIUS, origin_row + BOMB_RADIUS + 1):
            for c in range(origin_col - BOMB_RADIUS, origin_col + BOMB_RADIUS + 1):
                if board.is_valid((r, c)):
                    positions.append((r, c))
        return self._clear(PowerUpKind.BOMB, positions, BOMB_POINTS_PER_TILE, type_names)

    def _transform(self, type_names: Sequence[str] | None) -> PowerUpResult:
        choices = list(type_names) if type_names else spawnable_tile_types(self.world)
        if len(choices) < 2:
            return PowerUpResult(kind=PowerUpKind.TRANSFORM)
        source_type, target_type = self.rng.sample(choices, 2)
        affected = transform_tiles_to_type(self.world, source_type, target_type)
        if affected:
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason=PowerUpKind.TRANSFORM.value, positions=affected)
        return PowerUpResult(
            kind=PowerUpKind.TRANSFORM,
            affected_positions=affected,
            score_bonus=len(affected) * TRANSFORM_POINTS_PER_TILE,
        )

    def _clear(
        self,
        kind: PowerUpKind,
        positions: List[Position],
        points_per_tile: int,
        type_names: Sequence[str] | None,
    ) -> PowerUpResult:
        change = clear_tiles_with_cascade(self.world, positions, self.rng, type_names=type_names)
        affected = change.cleared_positions
        if not affected:
            return PowerUpResult(kind=kind)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason=kind.value, positions=affected)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=change.moves)
        if change.spawned:
            self.event_bus.emit(
                EVENT_REFILL_COMPLETED,
                new_tiles=[tile.position for tile in change.spawned],
            )
        return PowerUpResult(
            kind=kind,
            affected_positions=affected,
            new_tiles=change.spawned,
            score_bonus=len(affected) * points_per_tile,
            moves=change.moves,
        )
