from dataclasses import dataclass


@dataclass(slots=True)
class TileType:
    """Sphere type of one tile entity.

    Matching only compares ``type_name`` for equality; colours live in the
    registry's TileTypes.
    """
    type_name: str
