import pytest

from ecs.components.match_group import MatchShape
from ecs.systems.match_detection import detect_matches
from ecs.systems.scoring import (
    combo_bonus,
    named_patterns,
    score_positions,
    total_score,
    wave_score,
)
from tests.helpers import types_of


@pytest.mark.parametrize('count, shape, expected', [
    (3, MatchShape.HORIZONTAL, 300),
    (4, MatchShape.VERTICAL, 400),
    (5, MatchShape.L_SHAPE, 750),
    (5, MatchShape.T_SHAPE, 750),
    (4, MatchShape.SQUARE, 800),
    (5, MatchShape.CROSS, 1250),
])
def test_group_score_is_size_times_unit_times_shape(count, shape, expected):
    assert score_positions(count, shape) == expected


def test_combo_bonus_grows_with_multiplier():
    assert combo_bonus(300, 1) == 0
    assert combo_bonus(300, 2) == 300
    assert combo_bonus(300, 3) == 600


def test_total_score_excludes_pattern_points():
    groups = detect_matches(types_of('ccc'), 1, 3)
    assert total_score(groups) == 300
    assert total_score(groups, combo_multiplier=2) == 600


def test_wave_score_adds_pattern_points_and_combo():
    groups = detect_matches(types_of('ccc'), 1, 3)
    score = wave_score(groups, 2)
    assert (score.base, score.pattern_points, score.combo_bonus) == (300, 150, 300)
    assert score.total == 750


def test_wave_score_multiplier_scales_everything():
    groups = detect_matches(types_of('ccc'), 1, 3)
    assert wave_score(groups, 2, score_multiplier=2.0).total == 1500


def test_named_patterns_follow_group_order():
    groups = detect_matches(types_of('ccc', 'cAB', 'cDE'), 3, 3)
    assert named_patterns(groups) == ['Horizontal Line', 'Vertical Line', 'L-Shape']
    assert wave_score(groups).pattern_points == 150 + 150 + 200
