from ecs.systems.hint import find_hint, find_possible_moves, has_legal_move, possible_moves
from tests.helpers import make_world, types_of


def test_single_legal_swap_is_the_hint():
    world = make_world(['AAB', 'CDA', 'EFG'])
    moves = possible_moves(world)
    assert len(moves) == 1
    move = moves[0]
    assert {move.source, move.target} == {(0, 2), (1, 2)}
    assert move.match_count == 1
    assert move.potential_score == 300
    hint = find_hint(world)
    assert hint.move == move and not hint.exhausted


def test_moves_sorted_best_first_with_scan_order_ties():
    moves = find_possible_moves(types_of('ccgcc', 'ABcDE'), 2, 5)
    assert [(m.source, m.target, m.potential_score) for m in moves] == [
        ((0, 2), (1, 2), 500),
        ((0, 1), (0, 2), 300),
        ((0, 2), (0, 3), 300),
    ]


def test_stalemate_board_exhausts_hints():
    world = make_world()
    assert possible_moves(world) == []
    hint = find_hint(world)
    assert hint.move is None and hint.exhausted


def test_has_legal_move_agrees_with_enumeration():
    assert has_legal_move(types_of('AAB', 'CDA', 'EFG'), 3, 3)
    assert not has_legal_move(types_of('ABC', 'DEF', 'GHI'), 3, 3)


def test_swaps_into_empty_cells_are_skipped():
    assert find_possible_moves(types_of('cc.', 'ABc'), 2, 3) == []
