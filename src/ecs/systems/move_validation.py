"""Swap legality: adjacent, both cells occupied, and the swap produces a match."""
from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from esper import World

from ecs.components.grid_position import GridPosition
from ecs.components.match_group import MatchGroup
from ecs.systems.board_ops import board_dimensions, tile_type_map
from ecs.systems.match_detection import detect_matches

Position = Tuple[int, int]

INVALID_POSITION = "invalid_position"
NOT_ADJACENT = "not_adjacent"
EMPTY_CELL = "empty_cell"
NO_MATCH = "no_match"


def is_adjacent(a: Position, b: Position) -> bool:
    return GridPosition(*a).is_adjacent(b)


def swapped_copy(types: Mapping[Position, str], src: Position, dst: Position) -> Dict[Position, str]:
    """Scratch copy of ``types`` with the two cells exchanged; ``types`` is untouched."""
    src, dst = GridPosition(*src), GridPosition(*dst)
    swapped = dict(types)
    swapped[src], swapped[dst] = types[dst], types[src]
    return swapped


def simulate_swap(
    types: Mapping[Position, str], src: Position, dst: Position, rows: int, cols: int
) -> List[MatchGroup]:
    return detect_matches(swapped_copy(types, src, dst), rows, cols)


def rejection_reason(
    types: Mapping[Position, str], src: Position, dst: Position, rows: int, cols: int
) -> str | None:
    """Why a swap is illegal, or None when it is legal."""
    for row, col in (src, dst):
        if not (0 <= row < rows and 0 <= col < cols):
            return INVALID_POSITION
    if not is_adjacent(src, dst):
        return NOT_ADJACENT
    if GridPosition(*src) not in types or GridPosition(*dst) not in types:
        return EMPTY_CELL
    if not simulate_swap(types, src, dst, rows, cols):
        return NO_MATCH
    return None


def is_legal_swap(
    types: Mapping[Position, str], src: Position, dst: Position, rows: int, cols: int
) -> bool:
    return rejection_reason(types, src, dst, rows, cols) is None


def is_legal(world: World, src: Position, dst: Position) -> bool:
    """Check a swap against the live board without mutating it."""
    dims = board_dimensions(world)
    if not dims:
        return False
    rows, cols = dims
    return is_legal_swap(tile_type_map(world), src, dst, rows, cols)
