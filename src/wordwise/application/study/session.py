"""
Study session manager.

Owns the ordered word list, the current position, the navigation history
and the rollback records of one study session, and drives the scoring
algorithm and response-time estimator on every answer.

All operations run to completion on the caller's thread. Calls that make no
sense in the current state (answering with no active session, going back
past the start, rolling back with nothing recorded) are silently ignored:
they come from UI races, not from corrupted state.
"""

import logging
import random
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from wordwise.application.config import ScoringParams
from wordwise.domain.constants import AUTO_ADVANCE_DELAY, NEUTRAL_SCORE
from wordwise.domain.study.models import (
    ScoreChange,
    SessionStats,
    StudyResponse,
    StudySession,
    StudyWord,
    Word,
)
from wordwise.domain.study.ports import DifficultyUpdater, ScheduledTask, Scheduler

from .priority import priority_shuffle
from .response_time import calculate_smart_average_response_time
from .score_model import clamp_score, display_level_to_score, score_to_display_level
from .scoring import calculate_new_score
from .stats import calculate_session_progress, calculate_session_stats, generate_session_id

logger = logging.getLogger(__name__)

UpdateDifficultyFn = Callable[..., None]


@dataclass(frozen=True)
class _RollbackRecord:
    """A response plus the word state it replaced."""

    response: StudyResponse
    display_level: int
    consecutive_correct: int
    consecutive_correct_for_word: int
    average_response_time: float | None
    last_studied_time: float | None


class StudySessionManager:
    """
    State machine for one study session at a time.

    Idle -> Active <-> Paused -> Idle. Starting a new session discards any
    unfinished one.
    """

    def __init__(
        self,
        difficulty_updater: DifficultyUpdater | UpdateDifficultyFn | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        params: ScoringParams | None = None,
        advance_delay: float = AUTO_ADVANCE_DELAY,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            difficulty_updater: Port (or plain callable) notified after every
                scoring change and rollback.
            scheduler: Runs the delayed auto-advance. Without one the advance
                is held until the caller invokes `advance()`.
            rng: Random source for the priority shuffle.
            params: Scoring tunables.
            advance_delay: Seconds between an answer and the move to the next word.
            clock: Returns epoch seconds; injectable for tests.
        """
        if isinstance(difficulty_updater, DifficultyUpdater):
            self._notify = difficulty_updater.update_difficulty
        else:
            self._notify = difficulty_updater
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._params = params
        self._advance_delay = advance_delay
        self._clock = clock

        self._session: StudySession | None = None
        self._active = False
        self._paused = False
        self._words: list[StudyWord] = []
        self._index = 0
        self._history: list[int] = []
        self._rollback: dict[int, _RollbackRecord] = {}
        self._last_change: ScoreChange | None = None
        self._pending: ScheduledTask | None = None
        self._pending_token: tuple[str, int] | None = None

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def current_session(self) -> StudySession | None:
        """The running session, or the finished one until the next start."""
        return self._session

    @property
    def is_study_active(self) -> bool:
        return self._active and not self._paused

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_advance_pending(self) -> bool:
        return self._pending is not None

    @property
    def study_words(self) -> list[StudyWord]:
        return list(self._words)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_word(self) -> StudyWord | None:
        if not self._active or not 0 <= self._index < len(self._words):
            return None
        return self._words[self._index]

    @property
    def last_score_change(self) -> ScoreChange | None:
        return self._last_change

    @property
    def session_progress(self) -> float:
        return calculate_session_progress(self._index, len(self._words))

    @property
    def session_stats(self) -> SessionStats:
        if self._session is None:
            return SessionStats()
        return calculate_session_stats(self._session.responses)

    @property
    def has_next_word(self) -> bool:
        return self._index < len(self._words) - 1

    @property
    def has_previous_word(self) -> bool:
        return self._index > 0

    @property
    def can_go_back(self) -> bool:
        return self._active and len(self._history) > 1

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start_study_session(self, words: Sequence[Word]) -> None:
        """Start a new session over `words`; an empty list is ignored."""
        if not words:
            logger.debug("Ignoring start with no words")
            return

        self._cancel_pending()
        now = self._clock()
        study_words = priority_shuffle(
            [self._to_study_word(w) for w in words], rng=self._rng, now=now
        )

        self._session = StudySession(
            session_id=generate_session_id(),
            start_time=now,
            total_words=len(words),
        )
        self._words = study_words
        self._index = 0
        self._history = [0]
        self._rollback = {}
        self._last_change = None
        self._active = True
        self._paused = False

        logger.info(f"Study session started: {self._session.session_id} with {len(words)} words")

    def end_study_session(self) -> None:
        """End the session; word data and the finished session stay readable."""
        self._cancel_pending()
        if self._active:
            logger.info(f"Study session ended: {self._session.session_id}")
        self._active = False
        self._paused = False
        self._index = 0
        self._history = []

    def pause_session(self) -> None:
        if self._active:
            self._paused = True

    def resume_session(self) -> None:
        self._paused = False

    def close(self) -> None:
        """Tear down: no scheduled callback may land after this."""
        self.end_study_session()

    # ------------------------------------------------------------------
    # Word interaction
    # ------------------------------------------------------------------

    def respond_to_word(self, is_known: bool, response_time: float | None = None) -> None:
        """
        Record a known/unknown answer for the current word.

        Scores the answer, notifies the difficulty updater, and schedules the
        move to the next word (or the end of the session after the last one).
        """
        word = self.current_word
        if word is None or self._session is None or self._paused:
            return
        if self._pending is not None:
            # Already answered, waiting for the auto-advance
            return

        now = self._clock()
        previous_score = word.internal_score
        previous_level = word.display_level
        consecutive_correct = word.consecutive_correct if is_known else 0
        consecutive_for_word = word.consecutive_correct_for_word if is_known else 0

        result = calculate_new_score(
            previous_score,
            is_known,
            consecutive_correct,
            word.last_studied_time,
            word.study_responses,
            response_time,
            word.average_response_time,
            consecutive_for_word,
            now=now,
            params=self._params,
        )
        new_score = result.new_score
        new_level = score_to_display_level(new_score)
        timed_ms = float(response_time) if response_time and response_time > 0 else 0.0

        response = StudyResponse(
            word_id=word.id,
            is_known=is_known,
            timestamp=now,
            response_time=timed_ms,
            previous_score=previous_score,
            new_score=new_score,
            consecutive_correct=consecutive_correct + 1 if is_known else 0,
            consecutive_correct_for_word=consecutive_for_word + 1 if is_known else 0,
        )
        new_average = calculate_smart_average_response_time(
            [r.response_time for r in word.study_responses] + [timed_ms],
            timed_ms,
            word.average_response_time,
        )

        self._rollback[word.id] = _RollbackRecord(
            response=response,
            display_level=previous_level,
            consecutive_correct=word.consecutive_correct,
            consecutive_correct_for_word=word.consecutive_correct_for_word,
            average_response_time=word.average_response_time,
            last_studied_time=word.last_studied_time,
        )

        word.internal_score = new_score
        word.display_level = new_level
        word.consecutive_correct = response.consecutive_correct
        word.consecutive_correct_for_word = response.consecutive_correct_for_word
        word.average_response_time = new_average
        word.last_studied_time = now
        word.study_responses.append(response)

        self._session.responses.append(response)
        if is_known:
            self._session.correct_answers += 1
        else:
            self._session.incorrect_answers += 1

        self._last_change = ScoreChange(
            word_id=word.id,
            word_text=word.text,
            is_known=is_known,
            previous_score=previous_score,
            new_score=new_score,
            previous_level=previous_level,
            new_level=new_level,
            consecutive_correct=response.consecutive_correct,
            score_difference=new_score - previous_score,
            level_difference=new_level - previous_level,
            algorithm_details=result.algorithm_details,
        )

        if self._notify:
            self._notify(
                word.id,
                new_level,
                new_score,
                new_average,
                response.consecutive_correct_for_word,
                now,
            )

        logger.info(
            f"Word '{word.text}' {'known' if is_known else 'unknown'}: "
            f"{previous_score:.1f} -> {new_score:.1f} (level {new_level})"
        )
        self._schedule_advance()

    def advance(self) -> None:
        """
        Move on from an answered word now instead of waiting for the delay.

        The only way forward after an answer when no scheduler is set.
        Does nothing unless an advance is pending.
        """
        token = self._pending_token
        if self._pending is None or token is None:
            return
        self._cancel_pending()
        self._advance(token)

    def skip_word(self) -> None:
        """Move on without recording a response."""
        if not self._active or not self.has_next_word:
            return
        self._cancel_pending()
        self._move_to(self._index + 1)

    def go_to_previous_word(self) -> None:
        """Step back through the navigation history. Does not undo scoring."""
        if not self._active or len(self._history) <= 1:
            return
        self._cancel_pending()
        self._history.pop()
        self._index = self._history[-1]

    def rollback_response(self) -> None:
        """
        Undo the recorded response of the current word.

        Restores the word's score, level, streaks, average response time and
        last-studied time (also through the difficulty updater), removes the
        response from the word and the session, and lets the word be
        answered again. Calling it with nothing recorded does nothing.
        """
        word = self.current_word
        if word is None or self._session is None:
            return

        record = self._rollback.pop(word.id, None)
        if record is None:
            return

        self._cancel_pending()
        response = record.response

        word.internal_score = response.previous_score
        word.display_level = record.display_level
        word.consecutive_correct = record.consecutive_correct
        word.consecutive_correct_for_word = record.consecutive_correct_for_word
        word.average_response_time = record.average_response_time
        word.last_studied_time = record.last_studied_time
        _remove_identical(word.study_responses, response)

        if _remove_identical(self._session.responses, response):
            if response.is_known:
                self._session.correct_answers -= 1
            else:
                self._session.incorrect_answers -= 1

        if self._last_change is not None and self._last_change.word_id == word.id:
            self._last_change = None

        if self._notify:
            self._notify(
                word.id,
                word.display_level,
                word.internal_score,
                word.average_response_time,
                word.consecutive_correct_for_word,
                word.last_studied_time,
                restore=True,
            )

        logger.info(f"Rolled back '{word.text}' to {word.internal_score:.1f}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _to_study_word(self, word: Word) -> StudyWord:
        if word.internal_score is not None:
            score = clamp_score(word.internal_score)
        else:
            score = display_level_to_score(word.difficulty or int(NEUTRAL_SCORE))
        return StudyWord(
            word=word,
            internal_score=score,
            display_level=score_to_display_level(score),
            consecutive_correct_for_word=word.consecutive_correct_for_word,
            average_response_time=word.average_response_time,
            last_studied_time=word.last_studied_time,
        )

    def _move_to(self, index: int) -> None:
        self._index = index
        self._history.append(index)

    def _schedule_advance(self) -> None:
        token = (self._session.session_id, self._index)
        self._pending_token = token
        if self._scheduler is None:
            self._pending = _HeldAdvance()
            return
        self._pending = self._scheduler.call_later(
            self._advance_delay, lambda: self._advance(token)
        )

    def _advance(self, token: tuple[str, int]) -> None:
        self._pending = None
        self._pending_token = None
        if not self._active or self._session is None:
            return
        if token != (self._session.session_id, self._index):
            logger.debug(f"Dropping stale advance for {token}")
            return

        if self.has_next_word:
            self._move_to(self._index + 1)
        else:
            logger.info(f"Study session completed: {self._session.session_id}")
            self.end_study_session()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._pending_token = None


class _HeldAdvance(ScheduledTask):
    """Pending advance of a manager without a scheduler; only `advance()` runs it."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def _remove_identical(items: list[StudyResponse], target: StudyResponse) -> bool:
    """Remove the last element that *is* `target` (identity, not equality)."""
    for i in range(len(items) - 1, -1, -1):
        if items[i] is target:
            del items[i]
            return True
    return False
