from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from esper import World

from ecs.components.game_state import GameMode
from ecs.components.grid_position import GridPosition
from ecs.events.bus import EventBus
from ecs.systems.board_ops import apply_layout, get_board, tile_type_of
from ecs.systems.session import SessionController
from ecs.world import create_world

# One letter per sphere type; '.' marks an empty cell. Any other character is
# used as its own type name, which keeps small synthetic boards readable.
LETTERS: Dict[str, Optional[str]] = {
    'c': 'cyan',
    'g': 'neon_green',
    'p': 'purple',
    'o': 'orange',
    'y': 'yellow',
    'k': 'pink',
    '.': None,
}
CATALOGUE = ['cyan', 'neon_green', 'purple', 'orange', 'yellow', 'pink']


def layout(*rows: str) -> List[List[Optional[str]]]:
    return [[LETTERS.get(ch, ch) for ch in row] for row in rows]


def stalemate_rows(rows: int = 8, cols: int = 8) -> List[str]:
    """Match-free board on which no swap creates a match.

    Every row cycles through all six types, and each column alternates between
    two types three apart, so no line of three can ever be assembled.
    """
    letters = 'cgpoyk'
    return [''.join(letters[(col + 3 * row) % 6] for col in range(cols)) for row in range(rows)]


def make_world(
    rows_text: Sequence[str] | None = None,
    *,
    seed: int = 0,
    mode: GameMode = GameMode.PLAYING,
) -> World:
    rows_text = list(rows_text) if rows_text is not None else stalemate_rows()
    world = create_world(mode, rng=random.Random(seed), rows=len(rows_text), cols=len(rows_text[0]))
    apply_layout(world, layout(*rows_text))
    return world


def make_session(bus: EventBus | None = None, *, seed: int = 0, level: int = 1) -> SessionController:
    bus = bus or EventBus()
    world = create_world(rng=random.Random(seed), level=level)
    session = SessionController(world, bus)
    session.new_game()
    return session


def load_rows(world: World, rows_text: Sequence[str]) -> None:
    """Swap the live board contents for a hand-built layout."""
    apply_layout(world, layout(*rows_text))


def type_at(world: World, row: int, col: int) -> Optional[str]:
    entity = get_board(world).get((row, col))
    return None if entity is None else tile_type_of(world, entity)


def entity_grid(world: World) -> List[List[Optional[int]]]:
    board = get_board(world)
    return [[board.get(GridPosition(r, c)) for c in range(board.cols)] for r in range(board.rows)]


def recorder(bus: EventBus, name: str) -> list:
    events: list = []
    bus.subscribe(name, lambda sender, **payload: events.append(payload))
    return events


class CyclingRandom(random.Random):
    """Seeded generator whose ``choice`` walks the sequence in order."""

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self.index = 0

    def choice(self, seq):
        value = seq[self.index % len(seq)]
        self.index += 1
        return value


def types_of(*rows: str) -> Dict[GridPosition, str]:
    """Type snapshot for a hand-written layout, without building a world."""
    return {
        GridPosition(r, c): value
        for r, row in enumerate(layout(*rows))
        for c, value in enumerate(row)
        if value is not None
    }
