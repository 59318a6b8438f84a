from dataclasses import dataclass, field
from typing import List

from ecs.components.power_up import PowerUpKind


@dataclass(slots=True)
class PowerUpInventory:
    """Power-ups the player may activate, plus a log of the ones already used."""

    available: List[PowerUpKind] = field(default_factory=list)
    used: List[PowerUpKind] = field(default_factory=list)
