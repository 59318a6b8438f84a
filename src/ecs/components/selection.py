from dataclasses import dataclass
from typing import Optional

from ecs.components.grid_position import GridPosition


@dataclass(slots=True)
class Selection:
    """Tile the player picked as the first half of a swap."""
    position: Optional[GridPosition] = None
