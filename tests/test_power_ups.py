import random

import pytest

from ecs.components.power_up import PowerUpKind, PowerUpRarity
from ecs.events.bus import EventBus, EVENT_BOARD_CHANGED, EVENT_POWER_UP_EXPIRED
from ecs.systems.board_ops import board_snapshot, tile_type_map
from ecs.systems.power_up_lifecycle import PowerUpLifecycleSystem
from ecs.systems.power_up_resolver import PowerUpResolver
from tests.helpers import entity_grid, make_world, recorder


def make_resolver(world, bus=None, seed=0):
    bus = bus or EventBus()
    lifecycle = PowerUpLifecycleSystem(world, bus)
    return PowerUpResolver(world, bus, rng=random.Random(seed), lifecycle=lifecycle), lifecycle


def test_lightning_clears_targeted_row():
    world = make_world()
    bus = EventBus()
    changed = recorder(bus, EVENT_BOARD_CHANGED)
    resolver, _ = make_resolver(world, bus)
    before = entity_grid(world)

    result = resolver.apply(PowerUpKind.LIGHTNING, (3, 5))

    assert sorted(result.affected_positions) == [(3, c) for c in range(8)]
    assert result.score_bonus == 400
    assert len(result.new_tiles) == 8
    assert {tile.position.row for tile in result.new_tiles} == {0}
    after = entity_grid(world)
    for row in range(4, 8):
        assert after[row] == before[row], 'rows below the cleared one must not move'
    for row in range(1, 4):
        assert after[row] == before[row - 1]
    old_entities = {e for row in before for e in row}
    assert not old_entities & set(after[0])
    assert len(tile_type_map(world)) == 64
    assert changed and changed[0]['reason'] == 'lightning'


def test_lightning_without_target_picks_a_row():
    world = make_world()
    resolver, _ = make_resolver(world, seed=3)
    result = resolver.apply(PowerUpKind.LIGHTNING)
    rows = {pos.row for pos in result.affected_positions}
    assert len(rows) == 1 and len(result.affected_positions) == 8


def test_lightning_off_board_is_a_no_op():
    world = make_world()
    resolver, _ = make_resolver(world)
    before = board_snapshot(world)
    result = resolver.apply(PowerUpKind.LIGHTNING, (9, 9))
    assert result.affected_positions == [] and result.score_bonus == 0
    assert board_snapshot(world) == before


@pytest.mark.parametrize('kind', [PowerUpKind.LIGHTNING, PowerUpKind.BOMB])
@pytest.mark.parametrize('target', [(3,), (1.5, 2), 'ab', 5, (1, 2, 3)])
def test_malformed_target_is_a_no_op(kind, target):
    world = make_world()
    resolver, _ = make_resolver(world)
    before = board_snapshot(world)
    result = resolver.apply(kind, target)
    assert result.affected_positions == [] and result.score_bonus == 0
    assert board_snapshot(world) == before


def test_bomb_clears_three_by_three():
    world = make_world()
    resolver, _ = make_resolver(world)
    result = resolver.apply(PowerUpKind.BOMB, (3, 3))
    assert sorted(result.affected_positions) == [(r, c) for r in range(2, 5) for c in range(2, 5)]
    assert result.score_bonus == 9 * 75


def test_bomb_is_clipped_at_the_corner():
    world = make_world()
    resolver, _ = make_resolver(world)
    result = resolver.apply(PowerUpKind.BOMB, (0, 0))
    assert sorted(result.affected_positions) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert result.score_bonus == 4 * 75


def test_bomb_without_target_is_a_no_op():
    world = make_world()
    resolver, _ = make_resolver(world)
    before = board_snapshot(world)
    assert resolver.apply(PowerUpKind.BOMB).affected_positions == []
    assert board_snapshot(world) == before


def test_transform_converts_every_tile_of_one_type():
    world = make_world()
    resolver, _ = make_resolver(world, seed=11)
    before = tile_type_map(world)
    result = resolver.apply(PowerUpKind.TRANSFORM, type_names=['cyan', 'pink'])
    assert result.affected_positions
    source_types = {before[pos] for pos in result.affected_positions}
    assert len(source_types) == 1
    source = source_types.pop()
    target = 'pink' if source == 'cyan' else 'cyan'
    after = tile_type_map(world)
    assert source not in after.values()
    assert all(after[pos] == target for pos in result.affected_positions)
    assert len(result.affected_positions) == sum(1 for t in before.values() if t == source)
    assert result.score_bonus == 25 * len(result.affected_positions)


def test_transform_needs_two_types():
    world = make_world()
    resolver, _ = make_resolver(world)
    result = resolver.apply(PowerUpKind.TRANSFORM, type_names=['cyan'])
    assert result.affected_positions == []


def test_time_boost_does_not_touch_the_board():
    world = make_world()
    resolver, lifecycle = make_resolver(world)
    before = board_snapshot(world)
    result = resolver.apply(PowerUpKind.TIME_BOOST)
    assert result.affected_positions == [] and result.score_bonus == 0
    assert board_snapshot(world) == before
    assert lifecycle.active() == []


def test_multiplier_runs_for_thirty_seconds():
    world = make_world()
    bus = EventBus()
    expired = recorder(bus, EVENT_POWER_UP_EXPIRED)
    resolver, lifecycle = make_resolver(world, bus)
    resolver.apply(PowerUpKind.MULTIPLIER)
    assert lifecycle.score_multiplier() == 2.0
    assert lifecycle.advance(29.0) == []
    assert lifecycle.advance(1.0) == [PowerUpKind.MULTIPLIER]
    assert lifecycle.score_multiplier() == 1.0
    assert expired == [{'kind': PowerUpKind.MULTIPLIER, 'reason': 'duration'}]


def test_reactivation_replaces_running_power_up():
    world = make_world()
    bus = EventBus()
    expired = recorder(bus, EVENT_POWER_UP_EXPIRED)
    resolver, lifecycle = make_resolver(world, bus)
    resolver.apply(PowerUpKind.FREEZE)
    lifecycle.advance(6.0)
    resolver.apply(PowerUpKind.FREEZE)
    active = lifecycle.active()
    assert len(active) == 1 and active[0].remaining == 10.0
    assert expired[0]['reason'] == 'replaced'


def test_expire_and_clear():
    world = make_world()
    resolver, lifecycle = make_resolver(world)
    resolver.apply(PowerUpKind.FREEZE)
    resolver.apply(PowerUpKind.MULTIPLIER)
    assert lifecycle.expire(PowerUpKind.FREEZE)
    assert not lifecycle.expire(PowerUpKind.FREEZE)
    lifecycle.clear()
    assert lifecycle.active() == []


def test_rarity_table():
    assert PowerUpKind.LIGHTNING.rarity == PowerUpRarity.COMMON
    assert PowerUpKind.BOMB.rarity == PowerUpRarity.COMMON
    assert PowerUpKind.TRANSFORM.rarity == PowerUpRarity.UNCOMMON
    assert PowerUpKind.TIME_BOOST.rarity == PowerUpRarity.UNCOMMON
    assert PowerUpKind.MULTIPLIER.rarity == PowerUpRarity.RARE
    assert PowerUpKind.FREEZE.rarity == PowerUpRarity.RARE
    assert PowerUpRarity.COMMON.spawn_chance == 0.15
