from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from ecs.constants import MIN_SPHERE_TYPES

# Display colours for the six sphere types, in catalogue order.
SPHERE_COLORS: Dict[str, Tuple[int, int, int]] = {
    'cyan':       (0, 204, 230),
    'neon_green': (0, 255, 128),
    'purple':     (153, 51, 255),
    'orange':     (255, 77, 0),
    'yellow':     (255, 204, 0),
    'pink':       (255, 0, 128),
}


@dataclass(slots=True)
class TileTypes:
    """Canonical tile type definitions stored on a single entity.

    This component lives alongside TileTypeRegistry (tag). ``spawnable`` is the
    subset refill and population draw from, kept in catalogue order.
    """
    types: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: dict(SPHERE_COLORS))
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.spawnable:
            self.set_spawnable(self.spawnable)
        else:
            self.spawnable = list(self.types.keys())

    def spawnable_types(self) -> List[str]:
        return list(self.spawnable)

    def defined_types(self) -> List[str]:
        return list(self.types.keys())

    def set_spawnable(self, type_names: Iterable[str]) -> None:
        # Preserve order while filtering unknown types.
        seen: set[str] = set()
        filtered: List[str] = []
        for name in type_names:
            if name in self.types and name not in seen:
                filtered.append(name)
                seen.add(name)
        self.spawnable = filtered or list(self.types.keys())

    def set_spawnable_count(self, count: int) -> List[str]:
        """Enable the first ``count`` catalogue types, clamped to what a board can use."""
        defined = self.defined_types()
        count = max(min(MIN_SPHERE_TYPES, len(defined)), min(int(count), len(defined)))
        self.spawnable = defined[:count]
        return self.spawnable_types()
