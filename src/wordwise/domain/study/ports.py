"""
Ports (interfaces) for the study engine.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import Word


class DifficultyUpdater(ABC):
    """
    Port for persisting a word's study fields after a scoring event.

    Implementations:
        - YamlWordRepository: Rewrites the word entry in a YAML word file.
    """

    @abstractmethod
    def update_difficulty(
        self,
        word_id: int,
        display_level: int,
        internal_score: float | None = None,
        average_response_time: float | None = None,
        consecutive_correct_for_word: int | None = None,
        last_studied_time: float | None = None,
        *,
        restore: bool = False,
    ) -> None:
        """
        Persist new study fields for a word.

        Fire-and-forget: the study engine does not consume a result. Fields
        passed as None are left untouched, except with `restore=True`: a
        rollback hands over the word's earlier state and a None field is
        reset to unset.
        """
        pass


class WordRepository(ABC):
    """
    Port for loading the word list a session is started with.
    """

    @abstractmethod
    def load_words(self, set_id: str | None = None) -> list[Word]:
        """
        Load words, optionally restricted to one word set.
        """
        pass


class ScheduledTask(ABC):
    """Handle to a deferred callback."""

    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """
    Port for running a callback after a delay on the caller's thread.

    Implementations:
        - ManualScheduler: Runs callbacks when the owner advances its clock.
        - AsyncioScheduler: Uses the running event loop's call_later.
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """
        Schedule `callback` to run once after `delay` seconds.
        """
        pass


class WordStoreError(Exception):
    """Raised by word repositories when the backing store is unreadable or malformed."""
