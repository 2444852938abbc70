"""
Domain models for vocabulary study.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum


class ResponseSpeed(str, Enum):
    """Speed classification of a single response."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class Word:
    """
    A word pair as owned by the word list.

    The study engine only reads the study-related fields and reports changes
    to them through the `DifficultyUpdater` port.

    Attributes:
        id: Stable identity of the word.
        text1: Text in the learning language.
        text2: Text in the known language.
        difficulty: Display level 1-5, 0 when not yet rated.
        internal_score: Continuous mastery score (0.5-5.5), None before first study.
        average_response_time: Smoothed response time in milliseconds.
        consecutive_correct_for_word: Unbroken "known" responses across sessions.
        last_studied_time: Epoch seconds of the last response.
    """

    id: int
    text1: str
    text2: str = ""
    difficulty: int = 0
    internal_score: float | None = None
    average_response_time: float | None = None
    consecutive_correct_for_word: int = 0
    last_studied_time: float | None = None
    is_evaluated: bool = False
    set_id: str | None = None


@dataclass(frozen=True)
class StudyResponse:
    """
    A single recorded answer.

    Attributes:
        word_id: The word that was answered.
        is_known: True for "known", False for "unknown".
        timestamp: Epoch seconds of the answer.
        response_time: Milliseconds taken to answer, 0 when untimed.
        previous_score: Internal score before the answer.
        new_score: Internal score after the answer.
        consecutive_correct: Session streak after the answer.
        consecutive_correct_for_word: Persistent streak after the answer.
    """

    word_id: int
    is_known: bool
    timestamp: float
    response_time: float
    previous_score: float
    new_score: float
    consecutive_correct: int
    consecutive_correct_for_word: int


@dataclass
class StudyWord:
    """
    Session wrapper around a `Word` carrying the mutable study state.
    """

    word: Word
    internal_score: float
    display_level: int
    consecutive_correct: int = 0
    consecutive_correct_for_word: int = 0
    average_response_time: float | None = None
    last_studied_time: float | None = None
    study_responses: list[StudyResponse] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.word.id

    @property
    def text(self) -> str:
        return self.word.text1


@dataclass
class StudySession:
    """
    One bounded run through an ordered set of words.
    """

    session_id: str
    start_time: float
    total_words: int
    responses: list[StudyResponse] = field(default_factory=list)
    correct_answers: int = 0
    incorrect_answers: int = 0


@dataclass(frozen=True)
class AlgorithmDetails:
    """
    Breakdown of how a score change was computed.

    Branch-specific fields stay None unless that branch fired: the
    decrement fields for known answers, the increment fields for unknown ones.
    """

    speed: ResponseSpeed
    is_easy: bool
    is_medium: bool
    is_hard: bool
    time_factor: float
    learning_rate: float
    hours_since_studied: float
    response_time: float | None
    average_response_time: float | None
    time_ratio: float | None
    timing_factor: float
    timing_bonus: float
    timing_penalty: float
    is_likely_away: bool
    consecutive_timing_multiplier: float
    consecutive_correct_for_word: int

    # Known answers
    base_decrement: float | None = None
    streak_bonus: float | None = None
    mastery_bonus: float | None = None
    total_decrement: float | None = None

    # Unknown answers
    base_increment: float | None = None
    recent_failures: int | None = None
    failure_penalty: float | None = None
    total_increment: float | None = None


@dataclass(frozen=True)
class ScoreResult:
    new_score: float
    algorithm_details: AlgorithmDetails


@dataclass(frozen=True)
class ScoreChange:
    """The most recent scoring event, for feedback rendering."""

    word_id: int
    word_text: str
    is_known: bool
    previous_score: float
    new_score: float
    previous_level: int
    new_level: int
    consecutive_correct: int
    score_difference: float
    level_difference: int
    algorithm_details: AlgorithmDetails


@dataclass(frozen=True)
class SessionStats:
    total_words: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    accuracy: float = 0.0
    avg_score_change: float = 0.0
    longest_streak: int = 0
    current_streak: int = 0
