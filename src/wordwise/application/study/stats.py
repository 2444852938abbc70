"""
Session statistics.

Everything here is derived from the recorded responses on demand; nothing
is stored.
"""

from collections.abc import Sequence

from ulid import ULID

from wordwise.domain.study.models import SessionStats, StudyResponse


def generate_session_id() -> str:
    """Generate a unique, time-sortable session ID using ULID."""
    return f"study_{ULID()}"


def calculate_session_stats(responses: Sequence[StudyResponse]) -> SessionStats:
    total = len(responses)
    if total == 0:
        return SessionStats()

    correct = sum(1 for r in responses if r.is_known)
    avg_change = sum(r.new_score - r.previous_score for r in responses) / total

    longest = 0
    streak = 0
    for r in responses:
        if r.is_known:
            streak += 1
            longest = max(longest, streak)
        else:
            streak = 0

    return SessionStats(
        total_words=total,
        correct_answers=correct,
        incorrect_answers=total - correct,
        accuracy=round(correct / total * 100, 1),
        avg_score_change=round(avg_change, 2),
        longest_streak=longest,
        # streak already reset to 0 if the last answer was wrong
        current_streak=streak,
    )


def calculate_session_progress(current_index: int, total: int) -> float:
    """Percentage of the session reached, counting the current word."""
    if total <= 0:
        return 0.0
    return (current_index + 1) / total * 100
