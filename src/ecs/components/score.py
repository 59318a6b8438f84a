from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class Score:
    """Running session score and combo bookkeeping."""

    value: int = 0
    combo_multiplier: int = 1
    last_match_score: int = 0
    pattern_counts: Dict[str, int] = field(default_factory=dict)
