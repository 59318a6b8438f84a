from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ecs.components.power_up import PowerUpKind


class TileState(Enum):
    """Presentation state; matching ignores it."""
    NORMAL = auto()
    HIGHLIGHTED = auto()
    MATCHED = auto()
    TRANSFORMING = auto()
    EXPLODING = auto()
    FROZEN = auto()
    CHARGED = auto()


@dataclass(slots=True)
class TileStatus:
    state: TileState = TileState.NORMAL
    power_up: Optional[PowerUpKind] = None
