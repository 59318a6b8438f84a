from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ecs.components.grid_position import GridPosition


@dataclass(slots=True)
class Board:
    """Grid of optional tile entity ids.

    A non-empty cell holds the entity whose BoardPosition equals the cell's
    coordinates; ``board_ops.place_tile`` keeps the two in step.
    """
    rows: int
    cols: int
    cells: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None for _ in range(self.cols)] for _ in range(self.rows)]

    def is_valid(self, pos: Tuple[int, int]) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, pos: Tuple[int, int]) -> Optional[int]:
        if not self.is_valid(pos):
            raise IndexError(f"position {tuple(pos)} outside {self.rows}x{self.cols} board")
        return self.cells[pos[0]][pos[1]]

    def set(self, pos: Tuple[int, int], entity: Optional[int]) -> None:
        if not self.is_valid(pos):
            raise IndexError(f"position {tuple(pos)} outside {self.rows}x{self.cols} board")
        self.cells[pos[0]][pos[1]] = entity

    def positions(self) -> Iterator[GridPosition]:
        """All coordinates in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield GridPosition(row, col)
