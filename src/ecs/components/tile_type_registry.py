from dataclasses import dataclass


@dataclass(slots=True)
class TileTypeRegistry:
    """Tag for the one entity holding the sphere catalogue (its TileTypes component)."""
