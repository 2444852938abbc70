from wordwise.application.study.response_time import (
    calculate_smart_average_response_time,
    is_likely_away_response,
)


def test_empty_input_returns_none():
    assert calculate_smart_average_response_time([], None, None) is None
    assert calculate_smart_average_response_time([], 0, None) is None
    assert calculate_smart_average_response_time([0, -5], -1, None) is None


def test_untimed_sample_keeps_previous_average():
    assert calculate_smart_average_response_time([2000, 0], 0, 2500.0) == 2500.0
    assert calculate_smart_average_response_time([2000], None, 2500.0) == 2500.0


def test_initializes_from_median_of_positive_samples():
    avg = calculate_smart_average_response_time([1000, 0, 3000, 2000], 2000, None)
    assert avg == 2000.0


def test_initialization_ignores_away_outliers():
    avg = calculate_smart_average_response_time([1000, 2000, 45000], 45000, None)
    assert avg == 1500.0


def test_first_sample_only():
    assert calculate_smart_average_response_time([1800], 1800, None) == 1800.0


def test_slow_sample_raises_and_fast_sample_lowers_average():
    previous = 3000.0
    slower = calculate_smart_average_response_time([3000, 9000], 9000, previous)
    faster = calculate_smart_average_response_time([3000, 1000], 1000, previous)

    assert slower > previous
    assert faster < previous


def test_single_outlier_cannot_dominate_history():
    previous = 2000.0
    avg = calculate_smart_average_response_time([2000] * 20 + [60000], 60000, previous)
    # alpha drops to 0.1 for samples far from the average
    assert avg == previous * 0.9 + 60000 * 0.1
    assert avg < 60000 / 2


def test_similar_sample_uses_fast_alpha():
    avg = calculate_smart_average_response_time([2000, 2500], 2500, 2000.0)
    assert avg == 2000.0 * 0.6 + 2500 * 0.4


def test_non_positive_previous_average_is_treated_as_missing():
    assert calculate_smart_average_response_time([1200], 1200, 0) == 1200.0


def test_is_likely_away():
    assert is_likely_away_response(31000, 2000, [])
    assert is_likely_away_response(10000, 2000, [2000, 3000])
    # Far above average but not above twice the slowest recent sample
    assert not is_likely_away_response(10000, 2000, [6000])
    assert not is_likely_away_response(10000, 2000, [])
    assert not is_likely_away_response(2500, 2000, [2000])
