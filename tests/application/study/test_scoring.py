"""Tests for the adaptive scoring algorithm."""

import itertools

import pytest

from wordwise.application.config import ScoringParams
from wordwise.application.study.scoring import (
    calculate_new_score,
    classify_response_speed,
    count_recent_failures,
)
from wordwise.domain.study.models import ResponseSpeed, StudyResponse

NOW = 1_700_000_000.0
TWO_DAYS_AGO = NOW - 48 * 3600


def make_response(is_known: bool, timestamp: float = NOW - 60, response_time: float = 0.0):
    return StudyResponse(
        word_id=1,
        is_known=is_known,
        timestamp=timestamp,
        response_time=response_time,
        previous_score=3.0,
        new_score=3.0,
        consecutive_correct=0,
        consecutive_correct_for_word=0,
    )


class TestExamples:
    def test_fast_known_answer_is_easy(self):
        result = calculate_new_score(3.0, True, response_time=1500, now=NOW)

        details = result.algorithm_details
        assert details.is_easy is True
        assert details.is_medium is False
        assert details.speed is ResponseSpeed.EASY
        assert details.base_decrement == 0.8
        assert 2.2 <= result.new_score <= 2.6
        assert result.new_score == pytest.approx(2.2)

    def test_recent_failures_increase_the_penalty(self):
        failures = [make_response(False, NOW - 300 + i) for i in range(3)]

        with_failures = calculate_new_score(3.0, False, prior_responses=failures, now=NOW)
        without = calculate_new_score(3.0, False, now=NOW)

        assert with_failures.algorithm_details.recent_failures >= 3
        assert without.algorithm_details.recent_failures == 0
        assert with_failures.new_score - 3.0 > without.new_score - 3.0


class TestProperties:
    GRID = list(
        itertools.product(
            [0.5, 1.0, 2.7, 4.9, 5.5],  # previous score
            [None, 500, 4000, 12000, 40000],  # response time
            [None, 2000.0],  # average response time
            [0, 2, 10],  # consecutive correct for word
            [None, TWO_DAYS_AGO],  # last studied
        )
    )

    @pytest.mark.parametrize("is_known", [True, False])
    def test_score_stays_in_domain_and_moves_in_the_right_direction(self, is_known):
        for score, rt, avg, streak, last in self.GRID:
            result = calculate_new_score(
                score,
                is_known,
                consecutive_correct=streak,
                last_studied_time=last,
                response_time=rt,
                average_response_time=avg,
                consecutive_correct_for_word=streak,
                now=NOW,
            )
            assert 0.5 <= result.new_score <= 5.5
            if is_known:
                assert result.new_score <= score
            else:
                assert result.new_score >= score

    def test_out_of_domain_previous_score_is_clamped(self):
        assert calculate_new_score(9.0, False, now=NOW).new_score == 5.5
        assert calculate_new_score(-2.0, True, now=NOW).new_score == 0.5

    def test_deterministic(self):
        kwargs = dict(
            consecutive_correct=2,
            last_studied_time=NOW - 7200,
            prior_responses=[make_response(False), make_response(True, response_time=2100)],
            response_time=1700,
            average_response_time=2400.0,
            consecutive_correct_for_word=2,
            now=NOW,
        )
        first = calculate_new_score(3.4, True, **kwargs)
        second = calculate_new_score(3.4, True, **kwargs)

        assert first == second


class TestAdjustments:
    def test_fast_known_answer_earns_more_than_slow_one(self):
        fast = calculate_new_score(3.0, True, response_time=1000, now=NOW)
        slow = calculate_new_score(3.0, True, response_time=10000, now=NOW)

        assert fast.algorithm_details.is_easy
        assert slow.algorithm_details.is_hard
        assert fast.new_score < slow.new_score

    def test_untimed_answer_is_medium(self):
        result = calculate_new_score(3.0, True, now=NOW)
        assert result.algorithm_details.is_medium
        assert result.algorithm_details.timing_factor == 1.0
        assert result.new_score == pytest.approx(2.4)

    def test_long_gap_moves_the_score_further(self):
        known_fresh = calculate_new_score(3.0, True, now=NOW)
        known_stale = calculate_new_score(3.0, True, last_studied_time=TWO_DAYS_AGO, now=NOW)
        unknown_fresh = calculate_new_score(3.0, False, now=NOW)
        unknown_stale = calculate_new_score(3.0, False, last_studied_time=TWO_DAYS_AGO, now=NOW)

        assert known_stale.algorithm_details.time_factor == pytest.approx(1.3)
        assert known_stale.algorithm_details.hours_since_studied == pytest.approx(48.0)
        assert known_stale.new_score < known_fresh.new_score
        assert unknown_stale.new_score > unknown_fresh.new_score

    def test_learning_rate_follows_score_band(self):
        assert calculate_new_score(1.5, True, now=NOW).algorithm_details.learning_rate == 1.2
        assert calculate_new_score(3.0, True, now=NOW).algorithm_details.learning_rate == 1.0
        assert calculate_new_score(4.5, True, now=NOW).algorithm_details.learning_rate == 0.8

    def test_streak_bonus_is_capped(self):
        five = calculate_new_score(3.0, True, consecutive_correct_for_word=5, now=NOW)
        fifty = calculate_new_score(3.0, True, consecutive_correct_for_word=50, now=NOW)

        assert five.algorithm_details.streak_bonus == pytest.approx(0.5)
        assert fifty.algorithm_details.streak_bonus == pytest.approx(0.5)
        assert five.new_score == fifty.new_score

    def test_mastery_bonus_after_streak_threshold(self):
        below = calculate_new_score(3.0, True, consecutive_correct_for_word=2, now=NOW)
        at = calculate_new_score(3.0, True, consecutive_correct_for_word=3, now=NOW)

        assert below.algorithm_details.mastery_bonus == 0.0
        assert at.algorithm_details.mastery_bonus == pytest.approx(0.2)

    def test_single_step_is_capped(self):
        result = calculate_new_score(
            5.5,
            True,
            consecutive_correct=50,
            last_studied_time=TWO_DAYS_AGO,
            response_time=500,
            average_response_time=5000.0,
            consecutive_correct_for_word=100,
            now=NOW,
        )
        assert result.algorithm_details.total_decrement == pytest.approx(2.0)
        assert result.new_score == pytest.approx(3.5)

    def test_timing_bonus_for_fast_answer_relative_to_average(self):
        result = calculate_new_score(3.0, True, response_time=1000, average_response_time=4000.0, now=NOW)
        details = result.algorithm_details

        assert details.time_ratio == pytest.approx(0.25)
        assert details.timing_bonus == pytest.approx(0.7)
        assert details.timing_factor == pytest.approx(1.7)

    def test_slow_unknown_answer_is_penalized_more(self):
        quick = calculate_new_score(3.0, False, response_time=1000, average_response_time=4000.0, now=NOW)
        slow = calculate_new_score(3.0, False, response_time=7000, average_response_time=4000.0, now=NOW)

        assert quick.algorithm_details.timing_penalty == pytest.approx(0.1)
        assert slow.algorithm_details.timing_penalty > quick.algorithm_details.timing_penalty

    def test_away_response_is_treated_as_untimed(self):
        result = calculate_new_score(3.0, True, response_time=40000, now=NOW)
        assert result.algorithm_details.is_likely_away is True
        assert result.algorithm_details.is_medium

    def test_branch_specific_details(self):
        known = calculate_new_score(3.0, True, now=NOW).algorithm_details
        unknown = calculate_new_score(3.0, False, now=NOW).algorithm_details

        assert known.base_decrement is not None
        assert known.base_increment is None
        assert known.recent_failures is None
        assert unknown.base_increment is not None
        assert unknown.base_decrement is None
        assert unknown.total_increment is not None

    def test_params_override(self):
        params = ScoringParams(medium_correct_decrement=1.0)
        result = calculate_new_score(3.0, True, now=NOW, params=params)
        assert result.new_score == pytest.approx(2.0)


class TestClassifyResponseSpeed:
    def test_relative_to_average(self):
        assert classify_response_speed(2000, 4000.0) is ResponseSpeed.EASY
        assert classify_response_speed(4000, 4000.0) is ResponseSpeed.MEDIUM
        assert classify_response_speed(7000, 4000.0) is ResponseSpeed.HARD

    def test_absolute_thresholds_without_average(self):
        assert classify_response_speed(2500, None) is ResponseSpeed.EASY
        assert classify_response_speed(5000, None) is ResponseSpeed.MEDIUM
        assert classify_response_speed(9000, None) is ResponseSpeed.HARD

    def test_untimed(self):
        assert classify_response_speed(None, 4000.0) is ResponseSpeed.MEDIUM
        assert classify_response_speed(0, 4000.0) is ResponseSpeed.MEDIUM


class TestCountRecentFailures:
    def test_limited_to_last_responses(self):
        responses = [make_response(False) for _ in range(8)]
        assert count_recent_failures(responses, NOW) == 5

    def test_old_failures_fall_out_of_window(self):
        responses = [make_response(False, NOW - 30 * 3600), make_response(False), make_response(True)]
        assert count_recent_failures(responses, NOW) == 1

    def test_zero_lookback_disables(self):
        params = ScoringParams(failure_lookback_responses=0)
        assert count_recent_failures([make_response(False)], NOW, params) == 0
