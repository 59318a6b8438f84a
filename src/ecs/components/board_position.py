from dataclasses import dataclass


@dataclass(slots=True)
class BoardPosition:
    """Cell currently holding the tile entity."""
    row: int
    col: int
