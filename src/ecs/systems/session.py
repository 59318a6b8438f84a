"""Session controller: turn orchestration and the menu/playing/paused/end state machine."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from esper import World

from ecs.components.board import Board
from ecs.components.game_state import GameMode
from ecs.components.grid_position import GridPosition
from ecs.components.level import DifficultySettings, LevelConfig
from ecs.components.level_clock import LevelClock
from ecs.components.power_up import PowerUpKind
from ecs.components.power_up_inventory import PowerUpInventory
from ecs.components.score import Score
from ecs.constants import MAX_AVAILABLE_POWER_UPS, TIME_BOOST_SECONDS
from ecs.events.bus import (
    EVENT_MENU_NEW_GAME_SELECTED,
    EVENT_NO_MOVES_AVAILABLE,
    EVENT_PAUSE_TOGGLE,
    EVENT_POWER_UP_ACTIVATE_REQUEST,
    EVENT_POWER_UP_ACTIVATED,
    EVENT_POWER_UP_SPAWNED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EVENT_TICK,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EVENT_TILE_SWAPPED,
    EventBus,
)
from ecs.factories.levels import clamp_level, difficulty_for_level, generate_level
from ecs.systems.board import BoardSystem
from ecs.systems.board_ops import (
    get_board,
    get_tile_registry,
    resolve_rng,
    swap_tiles,
    tile_type_map,
)
from ecs.systems.hint import HintResult, find_hint, has_legal_move
from ecs.systems.match_resolution import CascadeTrace, MatchResolutionSystem
from ecs.systems.move_validation import rejection_reason
from ecs.systems.power_up_lifecycle import PowerUpLifecycleSystem
from ecs.systems.power_up_resolver import PowerUpResolver, PowerUpResult
from ecs.utils.game_state import set_game_mode
from ecs.utils.session_state import (
    can_move,
    get_current_level,
    get_game_state,
    get_inventory,
    get_level_clock,
    get_score,
)

logger = logging.getLogger("futurosphere.session")

NOT_PLAYING = "not_playing"


@dataclass(slots=True)
class MoveOutcome:
    accepted: bool
    source: GridPosition
    target: GridPosition
    reason: Optional[str] = None
    trace: Optional[CascadeTrace] = None
    moves_available: bool = True
    mode: GameMode = GameMode.PLAYING

    @property
    def score_gained(self) -> int:
        return self.trace.total_score if self.trace is not None else 0


@dataclass(frozen=True, slots=True)
class SessionResult:
    """Everything a persistence collaborator needs to record a finished level."""

    won: bool
    final_score: int
    level: int
    elapsed_time: float
    power_ups_used: Tuple[PowerUpKind, ...] = ()
    pattern_counts: Dict[str, int] = field(default_factory=dict)


class SessionController:
    """Owns one play session.

    Every operation runs to completion before returning; the host drives time
    through :meth:`tick` and may call the operations directly or through the
    event bus.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
        board_system: BoardSystem | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)
        self.board_system = board_system or BoardSystem(world, event_bus, rng=self.rng)
        self.resolution = MatchResolutionSystem(world, event_bus, rng=self.rng)
        self.power_ups = PowerUpLifecycleSystem(world, event_bus)
        self.resolver = PowerUpResolver(world, event_bus, rng=self.rng, lifecycle=self.power_ups)
        self.last_outcome: Optional[MoveOutcome] = None
        self.last_trace: Optional[CascadeTrace] = None
        self.last_result: Optional[SessionResult] = None

        self.event_bus.subscribe(EVENT_TICK, self._on_tick)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self._on_swap_request)
        self.event_bus.subscribe(EVENT_MENU_NEW_GAME_SELECTED, self._on_new_game)
        self.event_bus.subscribe(EVENT_POWER_UP_ACTIVATE_REQUEST, self._on_power_up_request)
        self.event_bus.subscribe(EVENT_PAUSE_TOGGLE, self._on_pause_toggle)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    @property
    def score(self) -> Score:
        return get_score(self.world)

    @property
    def clock(self) -> LevelClock:
        return get_level_clock(self.world)

    @property
    def inventory(self) -> PowerUpInventory:
        return get_inventory(self.world)

    @property
    def level(self) -> Optional[LevelConfig]:
        return get_current_level(self.world).config

    @property
    def difficulty(self) -> DifficultySettings:
        return get_current_level(self.world).difficulty

    @property
    def can_move(self) -> bool:
        return can_move(self.world)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_tick(self, sender, **payload) -> None:
        self.tick(payload.get("dt", 0.0))

    def _on_swap_request(self, sender, **payload) -> None:
        src = payload.get("src")
        dst = payload.get("dst")
        if src is None or dst is None:
            return
        self.attempt_move(src, dst)

    def _on_new_game(self, sender, **payload) -> None:
        self.new_game(payload.get("level"))

    def _on_power_up_request(self, sender, **payload) -> None:
        kind = payload.get("kind")
        if not isinstance(kind, PowerUpKind):
            return
        self.activate_power_up(kind, payload.get("target"))

    def _on_pause_toggle(self, sender, **payload) -> None:
        if self.mode == GameMode.PAUSED:
            self.resume()
        else:
            self.pause()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def new_game(self, level_number: int | None = None) -> Tuple[Board, DifficultySettings]:
        """Reset the session, populate a fresh board and start playing."""
        current = get_current_level(self.world)
        number = clamp_level(level_number if level_number is not None else current.number)
        config = generate_level(number)
        difficulty = difficulty_for_level(number)
        current.number = number
        current.config = config
        current.difficulty = difficulty

        self._reset_state(config)
        type_names = get_tile_registry(self.world).set_spawnable_count(difficulty.tile_type_count)
        self.board_system.populate(type_names)
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info(
            "level %d started: target %d, %.0fs, %d moves, %d types",
            number,
            config.target_score,
            config.time_limit,
            config.max_moves,
            len(type_names),
        )
        return get_board(self.world), difficulty

    def reset(self) -> None:
        """Abandon the session and return to the menu."""
        self._reset_state(self.level)
        set_game_mode(self.world, self.event_bus, GameMode.MENU)

    def _reset_state(self, config: Optional[LevelConfig]) -> None:
        score = get_score(self.world)
        score.value = 0
        score.combo_multiplier = 1
        score.last_match_score = 0
        score.pattern_counts.clear()
        clock = get_level_clock(self.world)
        if config is not None:
            clock.time_limit = config.time_limit
            clock.moves_left = config.max_moves
        clock.time_remaining = clock.time_limit
        clock.elapsed = 0.0
        inventory = get_inventory(self.world)
        inventory.available.clear()
        inventory.used.clear()
        self.power_ups.clear(reason="reset")
        self.board_system.clear_selection(reason="reset")
        self.last_outcome = None
        self.last_trace = None
        self.last_result = None

    def pause(self) -> bool:
        if self.mode != GameMode.PLAYING:
            return False
        set_game_mode(self.world, self.event_bus, GameMode.PAUSED)
        return True

    def resume(self) -> bool:
        if self.mode != GameMode.PAUSED:
            return False
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        return True

    def tick(self, dt: float) -> None:
        """Advance the countdown and power-up timers by ``dt`` seconds while playing."""
        if self.mode != GameMode.PLAYING or dt <= 0:
            return
        frozen = self.power_ups.is_active(PowerUpKind.FREEZE)
        self.power_ups.advance(dt)
        clock = get_level_clock(self.world)
        clock.elapsed += dt
        if frozen:
            return
        clock.time_remaining -= dt
        if clock.time_remaining <= 0:
            clock.time_remaining = 0.0
            self._end(won=False)

    def expire_power_up(self, kind: PowerUpKind) -> bool:
        return self.power_ups.expire(kind, reason="host")

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def select_tile(self, pos: Tuple[int, int]) -> Optional[MoveOutcome]:
        """Click-style input; returns the move outcome when the click completed a swap."""
        self.last_outcome = None
        requested = self.board_system.select(pos)
        if requested is None:
            return None
        return self.last_outcome

    def attempt_move(self, src: Tuple[int, int], dst: Tuple[int, int]) -> MoveOutcome:
        src, dst = GridPosition(*src), GridPosition(*dst)
        if not self.can_move:
            return self._reject(src, dst, NOT_PLAYING)
        board = get_board(self.world)
        reason = rejection_reason(tile_type_map(self.world), src, dst, board.rows, board.cols)
        if reason is not None:
            return self._reject(src, dst, reason)

        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        self.board_system.clear_selection(reason="board_changed")
        swap_tiles(self.world, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAPPED, src=src, dst=dst)
        get_level_clock(self.world).moves_left -= 1

        trace = self._resolve(reason="swap")
        self._check_end_conditions()
        outcome = MoveOutcome(
            accepted=True,
            source=src,
            target=dst,
            trace=trace,
            moves_available=self._check_moves_available(),
            mode=self.mode,
        )
        self.last_outcome = outcome
        return outcome

    def _reject(self, src: GridPosition, dst: GridPosition, reason: str) -> MoveOutcome:
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
        outcome = MoveOutcome(accepted=False, source=src, target=dst, reason=reason, mode=self.mode)
        self.last_outcome = outcome
        return outcome

    def hint(self) -> HintResult:
        return find_hint(self.world)

    def _check_moves_available(self) -> bool:
        if self.mode != GameMode.PLAYING:
            return True
        board = get_board(self.world)
        if has_legal_move(tile_type_map(self.world), board.rows, board.cols):
            return True
        logger.info("no legal moves left on the board")
        self.event_bus.emit(EVENT_NO_MOVES_AVAILABLE, reason="stalemate")
        return False

    # ------------------------------------------------------------------
    # Cascades and scoring
    # ------------------------------------------------------------------

    def _resolve(self, *, reason: str) -> CascadeTrace:
        score = get_score(self.world)
        trace = self.resolution.resolve(
            combo_multiplier=score.combo_multiplier,
            score_multiplier=self.power_ups.score_multiplier(),
            type_names=get_tile_registry(self.world).spawnable_types(),
        )
        for wave in trace.waves:
            score.last_match_score = wave.score_gained
            for name in wave.named_patterns:
                score.pattern_counts[name] = score.pattern_counts.get(name, 0) + 1
            self._roll_power_up_spawns()
        score.combo_multiplier = trace.final_combo_multiplier
        self.last_trace = trace
        self._add_score(trace.total_score, reason=reason)
        return trace

    def _add_score(self, delta: int, *, reason: str) -> None:
        if delta <= 0:
            return
        score = get_score(self.world)
        score.value += delta
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=delta, reason=reason)

    def _check_end_conditions(self) -> Optional[SessionResult]:
        config = self.level
        if config is None or self.mode != GameMode.PLAYING:
            return None
        clock = get_level_clock(self.world)
        if get_score(self.world).value >= config.target_score:
            return self._end(won=True)
        if clock.moves_left <= 0 or clock.time_remaining <= 0:
            return self._end(won=False)
        return None

    def _end(self, *, won: bool) -> SessionResult:
        current = get_current_level(self.world)
        score = get_score(self.world)
        clock = get_level_clock(self.world)
        inventory = get_inventory(self.world)
        set_game_mode(self.world, self.event_bus, GameMode.LEVEL_COMPLETE if won else GameMode.GAME_OVER)
        self.power_ups.clear(reason="session_end")
        self.board_system.clear_selection(reason="session_end")
        result = SessionResult(
            won=won,
            final_score=score.value,
            level=current.number,
            elapsed_time=clock.elapsed,
            power_ups_used=tuple(inventory.used),
            pattern_counts=dict(score.pattern_counts),
        )
        if won:
            current.number += 1
        self.last_result = result
        logger.info("level %d %s with %d points", result.level, "won" if won else "lost", result.final_score)
        self.event_bus.emit(
            EVENT_SESSION_ENDED,
            won=result.won,
            final_score=result.final_score,
            level=result.level,
            elapsed_time=result.elapsed_time,
            power_ups_used=list(result.power_ups_used),
            pattern_counts=dict(result.pattern_counts),
        )
        return result

    # ------------------------------------------------------------------
    # Power-ups
    # ------------------------------------------------------------------

    def grant_power_up(self, kind: PowerUpKind) -> bool:
        """Add ``kind`` to the available list, keeping only the newest entries."""
        config = self.level
        if config is not None and kind not in config.enabled_power_ups:
            return False
        inventory = get_inventory(self.world)
        inventory.available.append(kind)
        if len(inventory.available) > MAX_AVAILABLE_POWER_UPS:
            del inventory.available[:-MAX_AVAILABLE_POWER_UPS]
        self.event_bus.emit(EVENT_POWER_UP_SPAWNED, kind=kind, available=list(inventory.available))
        return True

    def _roll_power_up_spawns(self) -> None:
        config = self.level
        if config is None:
            return
        rate = self.difficulty.power_up_spawn_rate
        for kind in config.enabled_power_ups:
            if self.rng.random() < kind.rarity.spawn_chance * rate:
                self.grant_power_up(kind)

    def activate_power_up(self, kind: PowerUpKind, target: Tuple[int, int] | None = None) -> PowerUpResult:
        """Consume an available power-up and apply it; unusable requests return an empty result."""
        inventory = get_inventory(self.world)
        if not self.can_move or kind not in inventory.available:
            return PowerUpResult(kind=kind)
        inventory.available.remove(kind)
        inventory.used.append(kind)

        self.board_system.clear_selection(reason="board_changed")
        result = self.resolver.apply(
            kind,
            target,
            type_names=get_tile_registry(self.world).spawnable_types(),
        )
        if kind == PowerUpKind.TIME_BOOST:
            clock = get_level_clock(self.world)
            clock.time_remaining = min(clock.time_remaining + TIME_BOOST_SECONDS, clock.time_limit)
        self._add_score(result.score_bonus, reason=kind.value)
        self.event_bus.emit(EVENT_POWER_UP_ACTIVATED, kind=kind, result=result)
        if result.affected_positions:
            self._resolve(reason="power_up")
        self._check_end_conditions()
        return result
