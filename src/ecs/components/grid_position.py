from __future__ import annotations

from typing import List, NamedTuple


class GridPosition(NamedTuple):
    """Board coordinate (row, col). Compares and hashes like a plain tuple."""

    row: int
    col: int

    def distance(self, other: tuple[int, int]) -> int:
        return abs(self.row - other[0]) + abs(self.col - other[1])

    def is_adjacent(self, other: tuple[int, int]) -> bool:
        return self.distance(other) == 1

    def neighbors(self, rows: int, cols: int) -> List["GridPosition"]:
        """Axis-aligned neighbours in up, down, left, right order, clipped to the board."""
        candidates = [
            GridPosition(self.row - 1, self.col),
            GridPosition(self.row + 1, self.col),
            GridPosition(self.row, self.col - 1),
            GridPosition(self.row, self.col + 1),
        ]
        return [pos for pos in candidates if 0 <= pos.row < rows and 0 <= pos.col < cols]
