"""Score arithmetic for match groups and resolution waves."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ecs.components.match_group import MatchGroup, MatchShape
from ecs.constants import SCORE_UNIT


@dataclass(frozen=True, slots=True)
class WaveScore:
    base: int
    pattern_points: int
    combo_bonus: int
    combo_multiplier: int
    score_multiplier: float = 1.0

    @property
    def total(self) -> int:
        raw = self.base + self.pattern_points + self.combo_bonus
        return int(raw * self.score_multiplier)


def score_positions(count: int, shape: MatchShape, unit: int = SCORE_UNIT) -> int:
    return int(count * unit * shape.score_multiplier)


def score_group(group: MatchGroup, unit: int = SCORE_UNIT) -> int:
    return score_positions(len(group.positions), group.shape, unit)


def combo_bonus(base: int, combo_multiplier: int) -> int:
    return base * max(0, combo_multiplier - 1)


def total_score(groups: Iterable[MatchGroup], combo_multiplier: int = 1) -> int:
    """Group scores plus combo bonus; pattern points are not included."""
    base = sum(group.score for group in groups)
    return base + combo_bonus(base, combo_multiplier)


def named_patterns(groups: Iterable[MatchGroup]) -> List[str]:
    return [group.shape.pattern_name for group in groups]


def pattern_points(groups: Iterable[MatchGroup]) -> int:
    return sum(group.shape.pattern_points for group in groups)


def wave_score(
    groups: Sequence[MatchGroup],
    combo_multiplier: int = 1,
    *,
    score_multiplier: float = 1.0,
) -> WaveScore:
    """Score one resolution wave.

    ``score_multiplier`` scales the whole wave (an active multiplier power-up).
    """
    base = sum(group.score for group in groups)
    return WaveScore(
        base=base,
        pattern_points=pattern_points(groups),
        combo_bonus=combo_bonus(base, combo_multiplier),
        combo_multiplier=combo_multiplier,
        score_multiplier=score_multiplier,
    )
