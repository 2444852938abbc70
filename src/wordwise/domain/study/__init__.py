# Domain Study Package
from .models import (
    AlgorithmDetails,
    ResponseSpeed,
    ScoreChange,
    ScoreResult,
    SessionStats,
    StudyResponse,
    StudySession,
    StudyWord,
    Word,
)
from .ports import DifficultyUpdater, ScheduledTask, Scheduler, WordRepository, WordStoreError

__all__ = [
    "AlgorithmDetails",
    "ResponseSpeed",
    "ScoreChange",
    "ScoreResult",
    "SessionStats",
    "StudyResponse",
    "StudySession",
    "StudyWord",
    "Word",
    "DifficultyUpdater",
    "ScheduledTask",
    "Scheduler",
    "WordRepository",
    "WordStoreError",
]
