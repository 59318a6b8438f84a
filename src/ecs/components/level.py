from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ecs.components.power_up import PowerUpKind


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def multiplier(self) -> float:
        return _BAND_MULTIPLIER[self]


_BAND_MULTIPLIER = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2.0,
    Difficulty.EXPERT: 3.0,
}


@dataclass(frozen=True, slots=True)
class DifficultySettings:
    """Read-only tuning derived from the level number."""

    tile_type_count: int = 4
    time_limit: float = 60.0
    target_score_multiplier: float = 1.0
    power_up_spawn_rate: float = 1.0


@dataclass(frozen=True, slots=True)
class LevelConfig:
    number: int
    name: str
    description: str
    target_score: int
    time_limit: float
    max_moves: int
    difficulty: Difficulty
    enabled_power_ups: Tuple[PowerUpKind, ...] = tuple(PowerUpKind)


@dataclass(slots=True)
class CurrentLevel:
    """Level the session is playing (or will play on the next new game)."""

    number: int = 1
    config: Optional[LevelConfig] = None
    difficulty: DifficultySettings = field(default_factory=DifficultySettings)
