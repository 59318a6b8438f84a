"""Enumerate legal swaps and rank them by the score they would produce."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Set, Tuple

from esper import World

from ecs.components.grid_position import GridPosition
from ecs.systems.board_ops import board_dimensions, tile_type_map
from ecs.systems.move_validation import is_legal_swap, simulate_swap
from ecs.systems.scoring import total_score

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class PossibleMove:
    source: GridPosition
    target: GridPosition
    potential_score: int
    match_count: int


@dataclass(frozen=True, slots=True)
class HintResult:
    """Best move, or ``exhausted`` when the board has no legal swap at all."""
    move: Optional[PossibleMove]
    exhausted: bool


def find_possible_moves(types: Mapping[Position, str], rows: int, cols: int) -> List[PossibleMove]:
    """All legal swaps, best first.

    Cells are scanned row-major and neighbours up, down, left, right. A swap is
    listed once, under the first cell that reaches it. Ties keep scan order.
    """
    moves: List[PossibleMove] = []
    seen: Set[frozenset] = set()
    for row in range(rows):
        for col in range(cols):
            source = GridPosition(row, col)
            if source not in types:
                continue
            for target in source.neighbors(rows, cols):
                pair = frozenset((source, target))
                if pair in seen:
                    continue
                seen.add(pair)
                if target not in types:
                    continue
                groups = simulate_swap(types, source, target, rows, cols)
                if not groups:
                    continue
                moves.append(PossibleMove(
                    source=source,
                    target=target,
                    potential_score=total_score(groups, combo_multiplier=1),
                    match_count=len(groups),
                ))
    moves.sort(key=lambda move: -move.potential_score)
    return moves


def possible_moves(world: World) -> List[PossibleMove]:
    dims = board_dimensions(world)
    if not dims:
        return []
    rows, cols = dims
    return find_possible_moves(tile_type_map(world), rows, cols)


def best_move(world: World) -> Optional[PossibleMove]:
    moves = possible_moves(world)
    return moves[0] if moves else None


def find_hint(world: World) -> HintResult:
    move = best_move(world)
    return HintResult(move=move, exhausted=move is None)


def has_legal_move(types: Mapping[Position, str], rows: int, cols: int) -> bool:
    """Cheaper existence check: stops at the first legal swap."""
    for row in range(rows):
        for col in range(cols):
            source = GridPosition(row, col)
            if source not in types:
                continue
            # Right and down cover every unordered adjacent pair once.
            for target in (GridPosition(row, col + 1), GridPosition(row + 1, col)):
                if target.row < rows and target.col < cols and is_legal_swap(types, source, target, rows, cols):
                    return True
    return False
