from dataclasses import dataclass

from ecs.constants import DEFAULT_MOVES, DEFAULT_TIME_LIMIT


@dataclass(slots=True)
class LevelClock:
    """Countdown and move budget for the running level."""

    time_remaining: float = DEFAULT_TIME_LIMIT
    time_limit: float = DEFAULT_TIME_LIMIT
    elapsed: float = 0.0
    moves_left: int = DEFAULT_MOVES
