"""Accessors for the session singletons, creating them on first use."""
from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from ecs.components.game_state import GameMode, GameState
from ecs.components.level import CurrentLevel
from ecs.components.level_clock import LevelClock
from ecs.components.power_up_inventory import PowerUpInventory
from ecs.components.score import Score

T = TypeVar("T")


def _state_entity(world: World) -> int:
    for entity, _ in world.get_component(GameState):
        return entity
    return world.create_entity(GameState())


def get_or_create(world: World, component_type: Type[T]) -> T:
    existing = list(world.get_component(component_type))
    if existing:
        return existing[0][1]
    component = component_type()
    world.add_component(_state_entity(world), component)
    return component


def get_game_state(world: World) -> GameState:
    return get_or_create(world, GameState)


def get_score(world: World) -> Score:
    return get_or_create(world, Score)


def get_level_clock(world: World) -> LevelClock:
    return get_or_create(world, LevelClock)


def get_inventory(world: World) -> PowerUpInventory:
    return get_or_create(world, PowerUpInventory)


def get_current_level(world: World) -> CurrentLevel:
    return get_or_create(world, CurrentLevel)


def can_move(world: World) -> bool:
    """Moves are accepted only while playing with moves and time left."""
    clock = get_level_clock(world)
    return (
        get_game_state(world).mode == GameMode.PLAYING
        and clock.moves_left > 0
        and clock.time_remaining > 0
    )
