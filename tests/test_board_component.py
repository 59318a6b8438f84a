import pytest

from ecs.components.board import Board
from ecs.components.board_position import BoardPosition
from ecs.components.grid_position import GridPosition
from ecs.events.bus import EventBus
from ecs.systems.board import BoardSystem
from ecs.systems.board_ops import get_board, place_tile, spawn_tile, swap_tiles
from ecs.world import create_world


def test_board_component_exists():
    bus = EventBus(); world = create_world(rows=6, cols=7)
    board_system = BoardSystem(world, bus)
    boards = list(world.get_component(Board))
    assert len(boards) == 1, 'BoardSystem should reuse the world board'
    ent, comp = boards[0]
    assert comp.rows == 6 and comp.cols == 7
    assert board_system.board is comp


def test_board_system_creates_board_when_missing():
    bus = EventBus(); world = create_world()
    for ent, _ in list(world.get_component(Board)):
        world.delete_entity(ent, immediate=True)
    board_system = BoardSystem(world, bus, 5, 4)
    assert (board_system.board.rows, board_system.board.cols) == (5, 4)


def test_board_access_outside_range_raises():
    board = Board(rows=2, cols=2)
    assert board.get((1, 1)) is None
    with pytest.raises(IndexError):
        board.get((2, 0))
    with pytest.raises(IndexError):
        board.set((0, -1), 5)


def test_positions_are_row_major():
    board = Board(rows=2, cols=3)
    assert list(board.positions())[:4] == [(0, 0), (0, 1), (0, 2), (1, 0)]


def test_grid_position_adjacency_and_neighbors():
    pos = GridPosition(0, 0)
    assert pos.is_adjacent((0, 1))
    assert pos.is_adjacent((1, 0))
    assert not pos.is_adjacent((1, 1))
    assert not pos.is_adjacent((0, 2))
    assert not pos.is_adjacent((0, 0))
    assert GridPosition(1, 1).neighbors(3, 3) == [(0, 1), (2, 1), (1, 0), (1, 2)]
    assert pos.neighbors(3, 3) == [(1, 0), (0, 1)]


def test_place_and_swap_keep_board_position_in_sync():
    world = create_world(rows=3, cols=3)
    a = spawn_tile(world, (0, 0), 'cyan')
    b = spawn_tile(world, (0, 1), 'pink')
    assert swap_tiles(world, (0, 0), (0, 1))
    board = get_board(world)
    assert board.get((0, 0)) == b and board.get((0, 1)) == a
    pos_a = world.component_for_entity(a, BoardPosition)
    assert (pos_a.row, pos_a.col) == (0, 1)
    board.set((0, 1), None)
    place_tile(world, a, (2, 2))
    assert (pos_a.row, pos_a.col) == (2, 2)
    assert board.get((2, 2)) == a


def test_swap_with_empty_cell_is_refused():
    world = create_world(rows=2, cols=2)
    spawn_tile(world, (0, 0), 'cyan')
    assert not swap_tiles(world, (0, 0), (0, 1))
    assert not swap_tiles(world, (0, 0), (5, 5))
