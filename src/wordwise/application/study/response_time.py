"""
Response-time estimation.

Keeps a smoothed per-word average of how long answers take, filtering out
samples where the user was most likely away from the screen.
"""

import statistics
from collections.abc import Sequence

from wordwise.domain.constants import (
    AWAY_AVERAGE_MULTIPLIER,
    AWAY_RECENT_MULTIPLIER,
    AWAY_THRESHOLD_MS,
    DEFAULT_AVERAGE_RESPONSE_MS,
    OUTLIER_MULTIPLIER,
)


def calculate_smart_average_response_time(
    response_times: Sequence[float],
    latest_response_time: float | None,
    previous_average: float | None = None,
) -> float | None:
    """
    Compute the new average response time for a word.

    Args:
        response_times: All response times recorded so far, including the latest.
        latest_response_time: The sample that triggered this update.
        previous_average: The current average, None if the word has none yet.

    Returns:
        The new average in milliseconds, or None when there is no positive
        sample at all. Non-positive samples mean "untimed" and are ignored.
    """
    if previous_average is not None and previous_average <= 0:
        previous_average = None

    if not latest_response_time or latest_response_time <= 0:
        # Untimed answer: nothing new to learn from
        if previous_average is not None:
            return previous_average
        latest_response_time = None

    if previous_average is not None:
        # Adaptive alpha: the further off a sample is, the less it moves the average
        difference = abs(latest_response_time - previous_average) / previous_average
        if difference > 2:
            alpha = 0.1
        elif difference > 1:
            alpha = 0.2
        else:
            alpha = 0.4
        return previous_average * (1 - alpha) + latest_response_time * alpha

    samples = [t for t in response_times if t and t > 0]
    if latest_response_time is not None and not samples:
        samples = [latest_response_time]
    if not samples:
        return None

    reference = DEFAULT_AVERAGE_RESPONSE_MS
    filtered = [
        t for t in samples if t <= AWAY_THRESHOLD_MS and t <= reference * OUTLIER_MULTIPLIER
    ]
    # Median over mean for resistance to the odd slow sample
    return float(statistics.median(filtered or samples))


def is_likely_away_response(
    response_time: float,
    average_response_time: float,
    recent_response_times: Sequence[float],
) -> bool:
    """
    Detect whether a response time indicates the user left the page.

    True for anything over 30 seconds, or for a sample that is both far above
    the average and far above the slowest recent sample.
    """
    if response_time > AWAY_THRESHOLD_MS:
        return True

    recent = [t for t in recent_response_times if t > 0]
    much_longer_than_average = response_time > average_response_time * AWAY_AVERAGE_MULTIPLIER
    is_outlier = bool(recent) and response_time > max(recent) * AWAY_RECENT_MULTIPLIER
    return much_longer_than_average and is_outlier
