import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from esper import World

from ecs.components.board import Board
from ecs.components.grid_position import GridPosition
from ecs.components.selection import Selection
from ecs.components.tile_state import TileState
from ecs.constants import GRID_COLS, GRID_ROWS, POPULATE_MAX_ATTEMPTS
from ecs.events.bus import (
    EVENT_BOARD_POPULATED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from ecs.systems.board_ops import (
    apply_layout,
    get_entity_at,
    resolve_rng,
    set_tile_state,
    spawnable_tile_types,
)
from ecs.systems.hint import has_legal_move
from ecs.systems.match_detection import detect_matches
from ecs.utils.session_state import can_move

logger = logging.getLogger("futurosphere.board")

Layout = List[List[str]]


class BoardSystem:
    """Owns the board entity: population and the click-to-select swap flow."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)
        existing = list(self.world.get_component(Board))
        if existing:
            self.board_entity = existing[0][0]
        else:
            self.board_entity = self.world.create_entity(Board(rows=rows, cols=cols))
        self.selection = Selection()
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def populate(
        self,
        type_names: Sequence[str] | None = None,
        *,
        max_attempts: int = POPULATE_MAX_ATTEMPTS,
    ) -> List[int]:
        """Fill the board with a layout that has no match and, when possible, a legal move."""
        choices = list(type_names) if type_names else spawnable_tile_types(self.world)
        board = self.board
        fallback: Optional[Layout] = None
        for attempt in range(max_attempts):
            layout = self._generate_layout(board.rows, board.cols, choices)
            if layout is None:
                continue
            types = self._layout_types(layout)
            if detect_matches(types, board.rows, board.cols):
                continue
            if has_legal_move(types, board.rows, board.cols):
                logger.debug("board populated after %d attempt(s)", attempt + 1)
                return self._apply(layout, choices)
            fallback = layout
        if fallback is None:
            raise RuntimeError("Unable to populate board without matches")
        logger.warning("no layout with a legal move in %d attempts; using a match-free one", max_attempts)
        return self._apply(fallback, choices)

    def _apply(self, layout: Layout, choices: Sequence[str]) -> List[int]:
        self.clear_selection(reason="board_populated")
        created = apply_layout(self.world, layout)
        self.event_bus.emit(
            EVENT_BOARD_POPULATED,
            rows=self.board.rows,
            cols=self.board.cols,
            type_names=list(choices),
        )
        return created

    def _generate_layout(self, rows: int, cols: int, choices: Sequence[str]) -> Optional[Layout]:
        layout: Layout = []
        for row in range(rows):
            row_values: List[str] = []
            for col in range(cols):
                banned = set()
                # Prevent horizontal triple: if last two cells share a type, exclude it.
                if col >= 2 and row_values[col - 1] == row_values[col - 2]:
                    banned.add(row_values[col - 1])
                # Prevent vertical triple.
                if row >= 2 and layout[row - 1][col] == layout[row - 2][col]:
                    banned.add(layout[row - 1][col])
                # Prevent a 2x2 square closing on this cell.
                if row >= 1 and col >= 1:
                    left = row_values[col - 1]
                    if left == layout[row - 1][col] == layout[row - 1][col - 1]:
                        banned.add(left)
                available = [name for name in choices if name not in banned]
                if not available:
                    return None
                row_values.append(self.rng.choice(available))
            layout.append(row_values)
        return layout

    @staticmethod
    def _layout_types(layout: Layout) -> Dict[GridPosition, str]:
        return {
            GridPosition(row, col): type_name
            for row, values in enumerate(layout)
            for col, type_name in enumerate(values)
        }

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.select(GridPosition(row, col))

    def select(self, pos: Tuple[int, int]) -> Optional[Tuple[GridPosition, GridPosition]]:
        """Advance the selection; returns the (src, dst) pair when a swap was requested."""
        pos = GridPosition(*pos)
        if not can_move(self.world) or not self.board.is_valid(pos) or self.board.get(pos) is None:
            return None
        selected = self.selection.position
        if selected is None:
            self._select(pos)
            return None
        if selected == pos:
            self.clear_selection(reason="reselected")
            return None
        if selected.is_adjacent(pos):
            self.clear_selection(reason="swap_requested")
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=selected, dst=pos)
            return selected, pos
        self.clear_selection(reason="changed")
        self._select(pos)
        return None

    def _select(self, pos: GridPosition) -> None:
        self.selection.position = pos
        entity = get_entity_at(self.world, pos.row, pos.col)
        if entity is not None:
            set_tile_state(self.world, entity, TileState.HIGHLIGHTED)
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos.row, col=pos.col)

    def clear_selection(self, *, reason: str) -> None:
        prev = self.selection.position
        if prev is None:
            return
        self.selection.position = None
        entity = get_entity_at(self.world, prev.row, prev.col)
        if entity is not None:
            set_tile_state(self.world, entity, TileState.NORMAL)
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev.row, prev_col=prev.col)
