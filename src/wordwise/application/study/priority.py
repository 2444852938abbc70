"""
Priority shuffle for the initial study order.

A weighted random permutation: harder words tend to come first, but every
word can land anywhere, so no word is ever starved out of a session.
"""

import random
import time
from collections.abc import Sequence

from wordwise.domain.constants import (
    FAILURE_PRIORITY_BOOST,
    MIN_PRIORITY,
    TIME_DECAY_HOURS,
)
from wordwise.domain.study.models import StudyResponse, StudyWord


def word_priority(
    score: float,
    recent_responses: Sequence[StudyResponse] = (),
    last_studied_time: float | None = None,
    now: float | None = None,
) -> float:
    """
    Priority of a word for the study order; higher comes earlier on average.

    Starts from the internal score, gets a boost per recent failure, and is
    damped (down to half) for words studied within the last day.
    """
    priority = score
    priority += FAILURE_PRIORITY_BOOST * sum(1 for r in recent_responses if not r.is_known)

    if last_studied_time:
        now = time.time() if now is None else now
        hours = max(0.0, (now - last_studied_time) / 3600)
        decay = min(hours / TIME_DECAY_HOURS, 1.0)
        priority *= 0.5 + 0.5 * decay

    return max(priority, MIN_PRIORITY)


def priority_shuffle(
    words: Sequence[StudyWord],
    rng: random.Random | None = None,
    now: float | None = None,
) -> list[StudyWord]:
    """
    Return a biased random permutation of `words`.

    Weighted sampling without replacement (Efraimidis-Spirakis): each word
    draws the key u ** (1 / weight) and words are ordered by descending key.
    A word with twice the weight is more likely, not certain, to come first.
    """
    rng = rng or random.Random()
    now = time.time() if now is None else now

    keyed = []
    for word in words:
        weight = word_priority(
            word.internal_score, word.study_responses, word.last_studied_time, now
        )
        keyed.append((rng.random() ** (1.0 / weight), word))

    keyed.sort(key=lambda pair: pair[0], reverse=True)
    return [word for _, word in keyed]
