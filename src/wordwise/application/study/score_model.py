"""
Score model: mapping between the continuous internal score and display levels.

Pure functions, no state. Inputs are clamped, never rejected.
"""

import math

from wordwise.domain.constants import (
    MAX_LEVEL,
    MAX_SCORE,
    MIN_LEVEL,
    MIN_SCORE,
    NEUTRAL_SCORE,
    SCORE_PRECISION,
)

DIFFICULTY_LABELS = {
    1: "Very Easy",
    2: "Easy",
    3: "Medium",
    4: "Hard",
    5: "Very Hard",
}


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def round_score(score: float) -> float:
    """Round to the score precision (0.1), keeping float noise out of stored values."""
    return round(round(score / SCORE_PRECISION) * SCORE_PRECISION, 10)


def score_to_display_level(score: float) -> int:
    """
    Convert an internal score (0.5-5.5) to a display level (1-5).

    The domain is split into five bands of width 1.0:
    [0.5, 1.5) -> 1, [1.5, 2.5) -> 2, ..., [4.5, 5.5] -> 5.
    """
    level = math.floor(clamp_score(score) - MIN_SCORE) + MIN_LEVEL
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def display_level_to_score(level: int) -> float:
    """
    Convert a display level to the midpoint of its score band.

    Level 0 (unrated) and negative levels map to the neutral score.
    """
    if level < MIN_LEVEL:
        return NEUTRAL_SCORE
    return float(min(level, MAX_LEVEL))


def difficulty_label(level: int) -> str:
    return DIFFICULTY_LABELS.get(level, "Not Rated")
