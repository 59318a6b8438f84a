from dataclasses import dataclass
from enum import Enum


class PowerUpRarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"

    @property
    def spawn_chance(self) -> float:
        return _SPAWN_CHANCE[self]


_SPAWN_CHANCE = {
    PowerUpRarity.COMMON: 0.15,
    PowerUpRarity.UNCOMMON: 0.08,
    PowerUpRarity.RARE: 0.03,
}


class PowerUpKind(Enum):
    LIGHTNING = "lightning"
    TRANSFORM = "transform"
    TIME_BOOST = "time_boost"
    MULTIPLIER = "multiplier"
    BOMB = "bomb"
    FREEZE = "freeze"

    @property
    def rarity(self) -> PowerUpRarity:
        if self in (PowerUpKind.LIGHTNING, PowerUpKind.BOMB):
            return PowerUpRarity.COMMON
        if self in (PowerUpKind.TRANSFORM, PowerUpKind.TIME_BOOST):
            return PowerUpRarity.UNCOMMON
        return PowerUpRarity.RARE

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    PowerUpKind.LIGHTNING: "Clear an entire row",
    PowerUpKind.TRANSFORM: "Change sphere colors",
    PowerUpKind.TIME_BOOST: "Add 15 seconds",
    PowerUpKind.MULTIPLIER: "Double score for 30s",
    PowerUpKind.BOMB: "Clear surrounding spheres",
    PowerUpKind.FREEZE: "Stop timer for 10s",
}


@dataclass(slots=True)
class ActivePowerUp:
    """Timed power-up living on its own entity until ``remaining`` runs out."""

    kind: PowerUpKind
    remaining: float
    multiplier: float = 1.0
