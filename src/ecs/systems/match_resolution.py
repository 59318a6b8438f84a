"""Cascade resolution: detect, score, clear, drop and refill until the board settles.

``resolve_cascades`` runs the whole loop synchronously against the world and
returns a wave-by-wave trace; ``MatchResolutionSystem`` wraps it and replays
the trace onto the event bus for presentation code.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from esper import World

from ecs.components.grid_position import GridPosition
from ecs.components.match_group import MatchGroup
from ecs.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EventBus,
)
from ecs.systems.board_ops import (
    GravityMove,
    SpawnedTile,
    TypeEntry,
    board_dimensions,
    clear_tiles_with_cascade,
    resolve_rng,
)
from ecs.systems.match_detection import find_all_matches, matched_positions
from ecs.systems.scoring import WaveScore, named_patterns, wave_score

logger = logging.getLogger("futurosphere.cascade")


@dataclass(slots=True)
class CascadeWave:
    depth: int
    groups: List[MatchGroup]
    cleared: List[TypeEntry]
    score: WaveScore
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[SpawnedTile] = field(default_factory=list)

    @property
    def positions(self) -> List[GridPosition]:
        return [GridPosition(row, col) for row, col, _ in self.cleared]

    @property
    def named_patterns(self) -> List[str]:
        return named_patterns(self.groups)

    @property
    def score_gained(self) -> int:
        return self.score.total

    @property
    def combo_multiplier(self) -> int:
        return self.score.combo_multiplier


@dataclass(slots=True)
class CascadeTrace:
    waves: List[CascadeWave] = field(default_factory=list)
    final_combo_multiplier: int = 1
    truncated: bool = False

    @property
    def depth(self) -> int:
        return len(self.waves)

    @property
    def total_score(self) -> int:
        return sum(wave.score_gained for wave in self.waves)

    @property
    def matched(self) -> bool:
        return bool(self.waves)


def resolve_cascades(
    world: World,
    rng: random.Random | None = None,
    *,
    combo_multiplier: int = 1,
    score_multiplier: float = 1.0,
    type_names: Sequence[str] | None = None,
    max_waves: Optional[int] = None,
) -> CascadeTrace:
    """Resolve matches wave by wave until a detection pass finds nothing.

    The combo multiplier starts at ``combo_multiplier``, grows by one after each
    matching wave and is back to 1 once the loop ends. ``max_waves`` (default:
    one wave per cell) caps pathological refill streaks.
    """
    rng = resolve_rng(world, rng)
    if max_waves is None:
        dims = board_dimensions(world)
        max_waves = dims[0] * dims[1] if dims else 0
    trace = CascadeTrace()
    combo = max(1, combo_multiplier)
    while True:
        groups = find_all_matches(world)
        if not groups:
            break
        if len(trace.waves) >= max_waves:
            logger.warning("cascade stopped after %d waves", len(trace.waves))
            trace.truncated = True
            break
        score = wave_score(groups, combo, score_multiplier=score_multiplier)
        change = clear_tiles_with_cascade(world, matched_positions(groups), rng, type_names=type_names)
        trace.waves.append(CascadeWave(
            depth=len(trace.waves) + 1,
            groups=groups,
            cleared=change.cleared,
            score=score,
            moves=change.moves,
            spawned=change.spawned,
        ))
        logger.debug(
            "wave %d: %d group(s), %d cell(s), %d points at combo x%d",
            len(trace.waves),
            len(groups),
            len(change.cleared),
            score.total,
            combo,
        )
        combo += 1
    trace.final_combo_multiplier = 1
    return trace


class MatchResolutionSystem:
    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)

    def resolve(
        self,
        *,
        combo_multiplier: int = 1,
        score_multiplier: float = 1.0,
        type_names: Sequence[str] | None = None,
    ) -> CascadeTrace:
        trace = resolve_cascades(
            self.world,
            self.rng,
            combo_multiplier=combo_multiplier,
            score_multiplier=score_multiplier,
            type_names=type_names,
        )
        self.replay(trace)
        return trace

    def replay(self, trace: CascadeTrace) -> None:
        """Emit the per-wave events for a finished trace, in wave order."""
        for wave in trace.waves:
            positions = wave.positions
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=wave.depth, positions=positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, groups=wave.groups, depth=wave.depth)
            self.event_bus.emit(
                EVENT_MATCH_CLEARED,
                positions=positions,
                types=list(wave.cleared),
                score=wave.score_gained,
                combo_multiplier=wave.combo_multiplier,
                named_patterns=wave.named_patterns,
            )
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=wave.moves)
            if wave.spawned:
                self.event_bus.emit(
                    EVENT_REFILL_COMPLETED,
                    new_tiles=[tile.position for tile in wave.spawned],
                )
        if trace.waves:
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=trace.depth, score=trace.total_score)
