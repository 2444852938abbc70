import pytest

from wordwise.application.study.score_model import (
    clamp_score,
    difficulty_label,
    display_level_to_score,
    round_score,
    score_to_display_level,
)


@pytest.mark.parametrize(
    "score,level",
    [
        (0.5, 1),
        (1.49, 1),
        (1.5, 2),
        (2.5, 3),
        (3.0, 3),
        (3.49, 3),
        (3.5, 4),
        (4.5, 5),
        (5.5, 5),
    ],
)
def test_score_to_display_level_bands(score, level):
    assert score_to_display_level(score) == level


def test_score_to_display_level_clamps_out_of_domain():
    assert score_to_display_level(-3.0) == 1
    assert score_to_display_level(0.0) == 1
    assert score_to_display_level(9.0) == 5


def test_display_level_to_score_returns_band_midpoint():
    assert display_level_to_score(1) == 1.0
    assert display_level_to_score(3) == 3.0
    assert display_level_to_score(5) == 5.0


def test_unrated_level_maps_to_neutral_score():
    assert display_level_to_score(0) == 3.0
    assert display_level_to_score(-1) == 3.0


def test_level_above_range_clamps():
    assert display_level_to_score(7) == 5.0


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
def test_level_round_trip(level):
    assert score_to_display_level(display_level_to_score(level)) == level


def test_clamp_and_round():
    assert clamp_score(0.1) == 0.5
    assert clamp_score(6.0) == 5.5
    assert clamp_score(2.3) == 2.3
    assert round_score(2.2400001) == 2.2
    assert round_score(0.30000000000000004) == 0.3


def test_difficulty_labels():
    assert difficulty_label(1) == "Very Easy"
    assert difficulty_label(3) == "Medium"
    assert difficulty_label(5) == "Very Hard"
    assert difficulty_label(0) == "Not Rated"
