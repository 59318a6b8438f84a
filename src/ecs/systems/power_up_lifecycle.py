from __future__ import annotations

import logging
from typing import List

from esper import World

from ecs.components.power_up import ActivePowerUp, PowerUpKind
from ecs.events.bus import EVENT_POWER_UP_EXPIRED, EventBus

logger = logging.getLogger("futurosphere.power_ups")


class PowerUpLifecycleSystem:
    """Creation, countdown and expiry of timed power-up entities.

    Durations only move when the host calls :meth:`advance`; nothing here owns a clock.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def activate(self, kind: PowerUpKind, duration: float, multiplier: float = 1.0) -> int:
        """Register ``kind``; an already running power-up of the same kind is replaced."""
        for entity in self._entities_for(kind):
            self._expire_entity(entity, kind, reason="replaced")
        entity = self.world.create_entity(ActivePowerUp(kind=kind, remaining=duration, multiplier=multiplier))
        logger.debug("power-up %s active for %.1fs", kind.value, duration)
        return entity

    def advance(self, dt: float) -> List[PowerUpKind]:
        """Count every active power-up down by ``dt`` seconds; returns the kinds that ran out."""
        if dt <= 0:
            return []
        expired: List[PowerUpKind] = []
        for entity, active in list(self.world.get_component(ActivePowerUp)):
            active.remaining -= dt
            if active.remaining <= 0:
                active.remaining = 0.0
                self._expire_entity(entity, active.kind, reason="duration")
                expired.append(active.kind)
        return expired

    def expire(self, kind: PowerUpKind, *, reason: str = "expired") -> bool:
        entities = self._entities_for(kind)
        for entity in entities:
            self._expire_entity(entity, kind, reason=reason)
        return bool(entities)

    def clear(self, *, reason: str = "reset") -> None:
        for entity, active in list(self.world.get_component(ActivePowerUp)):
            self._expire_entity(entity, active.kind, reason=reason)

    def active(self) -> List[ActivePowerUp]:
        return [active for _, active in self.world.get_component(ActivePowerUp)]

    def is_active(self, kind: PowerUpKind) -> bool:
        return bool(self._entities_for(kind))

    def score_multiplier(self) -> float:
        factor = 1.0
        for active in self.active():
            if active.kind == PowerUpKind.MULTIPLIER:
                factor *= active.multiplier
        return factor

    def _entities_for(self, kind: PowerUpKind) -> List[int]:
        return [entity for entity, active in self.world.get_component(ActivePowerUp) if active.kind == kind]

    def _expire_entity(self, entity: int, kind: PowerUpKind, *, reason: str) -> None:
        self.world.delete_entity(entity, immediate=True)
        logger.debug("power-up %s expired (%s)", kind.value, reason)
        self.event_bus.emit(EVENT_POWER_UP_EXPIRED, kind=kind, reason=reason)
