"""Game state resource describing the active session mode."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """Session modes; only PLAYING accepts moves."""
    MENU = auto()
    PLAYING = auto()
    PAUSED = auto()
    LEVEL_COMPLETE = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the currently active game mode."""
    mode: GameMode = GameMode.MENU
