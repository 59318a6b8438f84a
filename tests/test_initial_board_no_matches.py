import random

import pytest

from ecs.components.board_position import BoardPosition
from ecs.events.bus import EventBus, EVENT_BOARD_POPULATED
from ecs.systems.board import BoardSystem
from ecs.systems.board_ops import get_board, tile_type_map
from ecs.systems.hint import has_legal_move
from ecs.systems.match_detection import detect_matches
from ecs.world import create_world
from tests.helpers import recorder


@pytest.mark.parametrize('seed', [0, 1, 2, 3, 42])
def test_initial_board_has_no_matches(seed):
    bus = EventBus(); world = create_world(rng=random.Random(seed))
    board = BoardSystem(world, bus)
    board.populate(['cyan', 'neon_green', 'purple', 'orange'])
    types = tile_type_map(world)
    assert len(types) == 64, 'Every cell should hold a tile'
    assert not detect_matches(types, 8, 8), 'Initial board should not contain any matches'
    assert has_legal_move(types, 8, 8)
    assert set(types.values()) <= {'cyan', 'neon_green', 'purple', 'orange'}


def test_populate_with_three_types_never_dead_ends():
    bus = EventBus(); world = create_world(rng=random.Random(5))
    BoardSystem(world, bus).populate(['cyan', 'purple', 'pink'])
    assert not detect_matches(tile_type_map(world), 8, 8)


def test_populate_replaces_previous_tiles_and_emits_event():
    bus = EventBus(); world = create_world(rng=random.Random(9))
    events = recorder(bus, EVENT_BOARD_POPULATED)
    board = BoardSystem(world, bus)
    first = board.populate()
    second = board.populate()
    assert not set(first) & set(second)
    assert len(list(world.get_component(BoardPosition))) == 64
    assert len(events) == 2 and events[-1]['rows'] == 8


def test_tile_positions_match_board_cells():
    bus = EventBus(); world = create_world(rng=random.Random(3))
    BoardSystem(world, bus).populate()
    board = get_board(world)
    for ent, pos in world.get_component(BoardPosition):
        assert board.get((pos.row, pos.col)) == ent
