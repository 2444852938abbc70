"""
Adaptive scoring algorithm.

Moves a word's internal score after each answer: known answers lower it
(towards "easy"), unknown answers raise it (towards "hard"). The size of the
step depends on how fast the answer came, the word's current score band,
streaks, recent failures and how long ago the word was last studied.

This is a pure computation module with no I/O. Given the same inputs
(including `now`) the result is always the same.
"""

import logging
import time
from collections.abc import Sequence

from wordwise.application.config import ScoringParams
from wordwise.domain.constants import DEFAULT_AVERAGE_RESPONSE_MS
from wordwise.domain.study.models import (
    AlgorithmDetails,
    ResponseSpeed,
    ScoreResult,
    StudyResponse,
)

from .response_time import is_likely_away_response
from .score_model import clamp_score, round_score

logger = logging.getLogger(__name__)

DEFAULT_PARAMS = ScoringParams()


def calculate_new_score(
    previous_score: float,
    is_known: bool,
    consecutive_correct: int = 0,
    last_studied_time: float | None = None,
    prior_responses: Sequence[StudyResponse] = (),
    response_time: float | None = None,
    average_response_time: float | None = None,
    consecutive_correct_for_word: int = 0,
    *,
    now: float | None = None,
    params: ScoringParams | None = None,
) -> ScoreResult:
    """
    Compute the new internal score for a word after an answer.

    Args:
        previous_score: Current internal score (clamped into 0.5-5.5).
        is_known: Whether the user knew the word.
        consecutive_correct: Session streak before this answer.
        last_studied_time: Epoch seconds of the previous answer, if any.
        prior_responses: This word's earlier responses in the session.
        response_time: Milliseconds taken to answer; None or <= 0 means untimed.
        average_response_time: The word's smoothed average response time.
        consecutive_correct_for_word: Persistent streak before this answer.
        now: Epoch seconds to evaluate time-dependent terms at.
        params: Tuning parameters; defaults from `wordwise.domain.constants`.

    Returns:
        ScoreResult with the new score and a breakdown of the applied terms.
    """
    p = params or DEFAULT_PARAMS
    now = time.time() if now is None else now
    current = clamp_score(previous_score)

    timed = response_time is not None and response_time > 0
    has_average = average_response_time is not None and average_response_time > 0
    time_ratio = response_time / average_response_time if timed and has_average else None

    recent_times = [r.response_time for r in prior_responses if r.response_time > 0]
    is_likely_away = timed and is_likely_away_response(
        response_time,
        average_response_time if has_average else DEFAULT_AVERAGE_RESPONSE_MS,
        recent_times,
    )

    speed = classify_response_speed(
        response_time if timed and not is_likely_away else None,
        average_response_time,
        p,
    )
    learning_rate = _learning_rate(current, p)
    hours_since_studied, time_factor = _time_factor(last_studied_time, now, p)

    timing_bonus = 0.0
    timing_penalty = 0.0
    consecutive_timing_multiplier = 1.0
    if time_ratio is not None:
        if is_known:
            timing_bonus, timing_penalty = _known_timing(time_ratio, is_likely_away)
            if current >= p.hard_score_threshold and time_ratio < 0.8:
                # Fast answers on hard words earn a little more
                timing_bonus *= 1.2
            if consecutive_correct > 0:
                consecutive_timing_multiplier = min(
                    1 + consecutive_correct * p.consecutive_timing_step,
                    p.consecutive_timing_cap,
                )
                timing_bonus *= consecutive_timing_multiplier
        else:
            timing_penalty = _unknown_timing(time_ratio, is_likely_away)

    common = dict(
        speed=speed,
        is_easy=speed is ResponseSpeed.EASY,
        is_medium=speed is ResponseSpeed.MEDIUM,
        is_hard=speed is ResponseSpeed.HARD,
        time_factor=time_factor,
        learning_rate=learning_rate,
        hours_since_studied=hours_since_studied,
        response_time=response_time,
        average_response_time=average_response_time,
        time_ratio=time_ratio,
        timing_bonus=timing_bonus,
        timing_penalty=timing_penalty,
        is_likely_away=is_likely_away,
        consecutive_timing_multiplier=consecutive_timing_multiplier,
        consecutive_correct_for_word=consecutive_correct_for_word,
    )

    if is_known:
        base_decrement = {
            ResponseSpeed.EASY: p.easy_correct_decrement,
            ResponseSpeed.MEDIUM: p.medium_correct_decrement,
            ResponseSpeed.HARD: p.hard_correct_decrement,
        }[speed]
        streak_bonus = min(
            p.streak_bonus_step * max(consecutive_correct_for_word, 0), p.streak_bonus_cap
        )
        mastery_bonus = (
            p.mastery_bonus if consecutive_correct_for_word >= p.mastery_streak else 0.0
        )
        timing_factor = max(p.min_timing_factor, 1.0 + timing_bonus - timing_penalty)

        total_decrement = min(
            (base_decrement + streak_bonus + mastery_bonus)
            * learning_rate
            * time_factor
            * timing_factor,
            p.max_step_decrement,
        )
        new_score = min(clamp_score(round_score(current - total_decrement)), current)

        details = AlgorithmDetails(
            **common,
            timing_factor=timing_factor,
            base_decrement=base_decrement,
            streak_bonus=streak_bonus,
            mastery_bonus=mastery_bonus,
            total_decrement=total_decrement,
        )
    else:
        base_increment = {
            ResponseSpeed.EASY: p.easy_incorrect_increment,
            ResponseSpeed.MEDIUM: p.medium_incorrect_increment,
            ResponseSpeed.HARD: p.hard_incorrect_increment,
        }[speed]
        recent_failures = count_recent_failures(prior_responses, now, p)
        failure_penalty = min(recent_failures * p.failure_penalty_step, p.failure_penalty_cap)
        timing_factor = 1.0 + timing_penalty

        total_increment = min(
            base_increment * (1 + failure_penalty) * learning_rate * time_factor * timing_factor,
            p.max_step_increment,
        )
        new_score = max(clamp_score(round_score(current + total_increment)), current)

        details = AlgorithmDetails(
            **common,
            timing_factor=timing_factor,
            base_increment=base_increment,
            recent_failures=recent_failures,
            failure_penalty=failure_penalty,
            total_increment=total_increment,
        )

    logger.debug(
        f"Score {current:.2f} -> {new_score:.2f} "
        f"(known={is_known}, speed={speed.value}, lr={learning_rate:.2f}, "
        f"time={time_factor:.2f}, timing={details.timing_factor:.2f})"
    )
    return ScoreResult(new_score=new_score, algorithm_details=details)


def classify_response_speed(
    response_time: float | None,
    average_response_time: float | None,
    params: ScoringParams | None = None,
) -> ResponseSpeed:
    """
    Classify an answer as easy (fast), medium or hard (slow).

    Relative to the word's average when it has one, otherwise against the
    absolute thresholds. Untimed answers are medium.
    """
    p = params or DEFAULT_PARAMS
    if response_time is None or response_time <= 0:
        return ResponseSpeed.MEDIUM

    if average_response_time is not None and average_response_time > 0:
        ratio = response_time / average_response_time
        if ratio < p.easy_time_ratio:
            return ResponseSpeed.EASY
        if ratio > p.hard_time_ratio:
            return ResponseSpeed.HARD
        return ResponseSpeed.MEDIUM

    if response_time <= p.fast_response_ms:
        return ResponseSpeed.EASY
    if response_time >= p.slow_response_ms:
        return ResponseSpeed.HARD
    return ResponseSpeed.MEDIUM


def count_recent_failures(
    responses: Sequence[StudyResponse],
    now: float,
    params: ScoringParams | None = None,
) -> int:
    """
    Count unknown answers inside the lookback window.

    The window is the last `failure_lookback_responses` responses, further
    limited to those from the last `failure_lookback_hours`.
    """
    p = params or DEFAULT_PARAMS
    if p.failure_lookback_responses <= 0:
        return 0

    cutoff = now - p.failure_lookback_hours * 3600
    window = list(responses)[-p.failure_lookback_responses :]
    return sum(1 for r in window if not r.is_known and r.timestamp >= cutoff)


def _learning_rate(score: float, p: ScoringParams) -> float:
    if score <= p.easy_score_threshold:
        return p.learning_rate_easy
    if score >= p.hard_score_threshold:
        return p.learning_rate_hard
    return p.learning_rate_medium


def _time_factor(
    last_studied_time: float | None, now: float, p: ScoringParams
) -> tuple[float, float]:
    """
    Longer gaps since the last study move the score further in either direction.

    Returns (hours_since_studied, time_factor).
    """
    if not last_studied_time:
        return 0.0, 1.0

    hours = max(0.0, (now - last_studied_time) / 3600)
    decay = min(hours / p.time_decay_hours, 1.0)
    return hours, 1.0 + p.time_decay_factor * decay


def _known_timing(ratio: float, is_likely_away: bool) -> tuple[float, float]:
    """Returns (bonus, penalty) for a known answer at the given speed ratio."""
    if ratio < 0.5:
        return 0.5 + (0.5 - ratio) * 0.8, 0.0
    if ratio < 0.7:
        return 0.3 + (0.7 - ratio) * 0.5, 0.0
    if ratio < 0.9:
        return 0.15 + (0.9 - ratio) * 0.75, 0.0
    if ratio < 1.1:
        return 0.05, 0.0
    if ratio < 1.5 or is_likely_away:
        return 0.0, 0.0
    return 0.0, min((ratio - 1.5) * 0.2, 0.3)


def _unknown_timing(ratio: float, is_likely_away: bool) -> float:
    """Penalty for an unknown answer; slow failures weigh more than snap guesses."""
    if ratio < 0.5:
        penalty = 0.1
    elif ratio < 0.8:
        penalty = 0.15
    elif ratio < 1.2:
        penalty = 0.2
    elif ratio < 2.0:
        penalty = 0.25 + (ratio - 1.2) * 0.1
    elif not is_likely_away:
        penalty = 0.4
    else:
        penalty = 0.0

    if is_likely_away:
        penalty *= 0.5
    return penalty
