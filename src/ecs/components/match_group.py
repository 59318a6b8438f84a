from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List

from ecs.components.grid_position import GridPosition


class MatchShape(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    L_SHAPE = "l_shape"
    T_SHAPE = "t_shape"
    SQUARE = "square"
    CROSS = "cross"

    @property
    def score_multiplier(self) -> float:
        return _MULTIPLIERS[self]

    @property
    def pattern_name(self) -> str:
        return _PATTERN_NAMES[self]

    @property
    def pattern_points(self) -> int:
        return _PATTERN_POINTS[self]


_MULTIPLIERS = {
    MatchShape.HORIZONTAL: 1.0,
    MatchShape.VERTICAL: 1.0,
    MatchShape.L_SHAPE: 1.5,
    MatchShape.T_SHAPE: 1.5,
    MatchShape.SQUARE: 2.0,
    MatchShape.CROSS: 2.5,
}

_PATTERN_NAMES = {
    MatchShape.HORIZONTAL: "Horizontal Line",
    MatchShape.VERTICAL: "Vertical Line",
    MatchShape.L_SHAPE: "L-Shape",
    MatchShape.T_SHAPE: "T-Shape",
    MatchShape.SQUARE: "Square",
    MatchShape.CROSS: "Cross",
}

# Flat bonus for each recognised pattern in a wave.
_PATTERN_POINTS = {
    MatchShape.HORIZONTAL: 150,
    MatchShape.VERTICAL: 150,
    MatchShape.L_SHAPE: 200,
    MatchShape.T_SHAPE: 200,
    MatchShape.SQUARE: 250,
    MatchShape.CROSS: 300,
}


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """One detected group; rebuilt on every detection pass."""

    positions: FrozenSet[GridPosition]
    type_name: str
    shape: MatchShape
    score: int

    def sorted_positions(self) -> List[GridPosition]:
        return sorted(self.positions)

    def __len__(self) -> int:
        return len(self.positions)
