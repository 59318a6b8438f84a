"""Level and difficulty tables, derived purely from the level number."""
from __future__ import annotations

from typing import Mapping

from ecs.components.level import Difficulty, DifficultySettings, LevelConfig
from ecs.components.power_up import PowerUpKind
from ecs.constants import (
    DEFAULT_MOVES,
    DEFAULT_TIME_LIMIT,
    LEVEL_TARGET_BASE,
    MIN_MOVES,
    MIN_TIME_LIMIT,
)

_DIFFICULTY_SETTINGS: Mapping[Difficulty, DifficultySettings] = {
    Difficulty.EASY: DifficultySettings(
        tile_type_count=4,
        time_limit=DEFAULT_TIME_LIMIT,
        target_score_multiplier=1.0,
        power_up_spawn_rate=1.0,
    ),
    Difficulty.MEDIUM: DifficultySettings(
        tile_type_count=5,
        time_limit=DEFAULT_TIME_LIMIT - 5,
        target_score_multiplier=1.2,
        power_up_spawn_rate=0.8,
    ),
    Difficulty.HARD: DifficultySettings(
        tile_type_count=6,
        time_limit=DEFAULT_TIME_LIMIT - 10,
        target_score_multiplier=1.5,
        power_up_spawn_rate=0.6,
    ),
    Difficulty.EXPERT: DifficultySettings(
        tile_type_count=6,
        time_limit=max(MIN_TIME_LIMIT, DEFAULT_TIME_LIMIT - 15),
        target_score_multiplier=2.0,
        power_up_spawn_rate=0.4,
    ),
}


def clamp_level(number: int) -> int:
    try:
        number = int(number)
    except (TypeError, ValueError):
        return 1
    return max(1, number)


def difficulty_band(number: int) -> Difficulty:
    number = clamp_level(number)
    if number <= 10:
        return Difficulty.EASY
    if number <= 25:
        return Difficulty.MEDIUM
    if number <= 40:
        return Difficulty.HARD
    return Difficulty.EXPERT


def difficulty_for_level(number: int) -> DifficultySettings:
    return _DIFFICULTY_SETTINGS[difficulty_band(number)]


def generate_level(number: int) -> LevelConfig:
    """Build the level parameters for ``number`` (values below 1 are treated as level 1)."""
    number = clamp_level(number)
    difficulty = difficulty_band(number)
    target_score = int(number * LEVEL_TARGET_BASE * difficulty.multiplier)
    return LevelConfig(
        number=number,
        name=f"Level {number}",
        description=f"Complete level {number} by reaching {target_score} points",
        target_score=target_score,
        time_limit=max(MIN_TIME_LIMIT, DEFAULT_TIME_LIMIT - number * 2.0),
        max_moves=max(MIN_MOVES, DEFAULT_MOVES - number // 2),
        difficulty=difficulty,
        enabled_power_ups=tuple(PowerUpKind),
    )
