import random

from esper import World

from ecs.components.board import Board
from ecs.components.game_state import GameMode, GameState
from ecs.components.level import CurrentLevel
from ecs.components.level_clock import LevelClock
from ecs.components.power_up_inventory import PowerUpInventory
from ecs.components.score import Score
from ecs.components.tile_type_registry import TileTypeRegistry
from ecs.components.tile_types import TileTypes
from ecs.constants import GRID_COLS, GRID_ROWS


def create_world(
    initial_mode: GameMode = GameMode.MENU,
    *,
    rng: random.Random | None = None,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    level: int = 1,
) -> World:
    """Build an empty session world: state singletons, tile registry and an empty board."""
    world = World()
    setattr(world, "random", rng or random.Random())

    # Register the global game state resource alongside the other session singletons.
    state_entity = world.create_entity()
    world.add_component(state_entity, GameState(mode=initial_mode))
    world.add_component(state_entity, Score())
    world.add_component(state_entity, LevelClock())
    world.add_component(state_entity, PowerUpInventory())
    world.add_component(state_entity, CurrentLevel(number=max(1, level)))

    # Create single registry entity with canonical types
    world.create_entity(TileTypeRegistry(), TileTypes())

    world.create_entity(Board(rows=rows, cols=cols))
    return world
