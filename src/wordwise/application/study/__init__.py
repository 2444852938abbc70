# Application Study Package
from .priority import priority_shuffle, word_priority
from .response_time import calculate_smart_average_response_time, is_likely_away_response
from .score_model import (
    clamp_score,
    difficulty_label,
    display_level_to_score,
    round_score,
    score_to_display_level,
)
from .scoring import calculate_new_score, classify_response_speed, count_recent_failures
from .session import StudySessionManager
from .stats import calculate_session_progress, calculate_session_stats, generate_session_id

__all__ = [
    "StudySessionManager",
    "calculate_new_score",
    "calculate_session_progress",
    "calculate_session_stats",
    "calculate_smart_average_response_time",
    "clamp_score",
    "classify_response_speed",
    "count_recent_failures",
    "difficulty_label",
    "display_level_to_score",
    "generate_session_id",
    "is_likely_away_response",
    "priority_shuffle",
    "round_score",
    "score_to_display_level",
    "word_priority",
]
