"""
YAML Word Repository — Infrastructure adapter for a YAML word list file.

Implements WordRepository and DifficultyUpdater on a document of the form:

    words:
      - id: 1
        text1: house
        text2: ev
        difficulty: 3
        internal_score: 3.2
        average_response_time: 2400
        consecutive_correct_for_word: 1
        last_studied_time: 1718000000.0
        set_id: basics
"""

import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from wordwise.domain.study.models import Word
from wordwise.domain.study.ports import DifficultyUpdater, WordRepository, WordStoreError

logger = logging.getLogger(__name__)


class YamlWordRepository(WordRepository, DifficultyUpdater):
    """
    Loads words from, and writes study fields back to, a YAML file.

    Every update rewrites the file atomically (temp file + replace).
    """

    def __init__(self, path: Path, clock: Callable[[], float] = time.time):
        self.path = Path(path)
        self._clock = clock

    def load_words(self, set_id: str | None = None) -> list[Word]:
        entries = self._read_entries()
        words = []
        for i, entry in enumerate(entries):
            try:
                word = _entry_to_word(entry)
            except (KeyError, TypeError, ValueError) as e:
                raise WordStoreError(f"{self.path}: invalid word entry #{i + 1}: {e}") from e
            if set_id is None or word.set_id == set_id:
                words.append(word)
        return words

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
        Rewrite the study fields of one word.

        A regular update stamps `last_studied_time` with the clock when the
        caller gives none. With `restore=True` every field is written as
        given and None removes the key, so a rolled-back answer leaves no
        trace in the file.
        """
        if average_response_time is not None:
            average_response_time = round(average_response_time, 1)
        if last_studied_time is None and not restore:
            last_studied_time = self._clock()

        entries = self._read_entries()
        for entry in entries:
            if entry.get("id") != word_id:
                continue

            entry["difficulty"] = display_level
            entry["is_evaluated"] = display_level > 0
            fields = {
                "internal_score": internal_score,
                "average_response_time": average_response_time,
                "consecutive_correct_for_word": consecutive_correct_for_word,
                "last_studied_time": last_studied_time,
            }
            for key, value in fields.items():
                if value is not None:
                    entry[key] = value
                elif restore:
                    entry.pop(key, None)

            self._write_entries(entries)
            action = "Restored" if restore else "Updated"
            logger.debug(f"{action} word {word_id}: level={display_level} score={internal_score}")
            return

        logger.warning(f"Word {word_id} not found in {self.path}")

    def _read_entries(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise WordStoreError(f"{self.path}: invalid YAML: {e}") from e
        except OSError as e:
            raise WordStoreError(f"{self.path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, dict) or not isinstance(data.get("words", []), list):
            raise WordStoreError(f"{self.path}: expected a mapping with a 'words' list")

        entries = data.get("words") or []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise WordStoreError(f"{self.path}: word entry #{i + 1} is not a mapping")
        return entries

    def _write_entries(self, entries: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump({"words": entries}, allow_unicode=True, sort_keys=False)

        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise WordStoreError(f"{self.path}: could not write: {e}") from e


def _entry_to_word(entry: dict[str, Any]) -> Word:
    def opt_float(key: str) -> float | None:
        value = entry.get(key)
        return float(value) if value is not None else None

    return Word(
        id=int(entry["id"]),
        text1=str(entry["text1"]),
        text2=str(entry.get("text2", "")),
        difficulty=int(entry.get("difficulty") or 0),
        internal_score=opt_float("internal_score"),
        average_response_time=opt_float("average_response_time"),
        consecutive_correct_for_word=int(entry.get("consecutive_correct_for_word") or 0),
        last_studied_time=opt_float("last_studied_time"),
        is_evaluated=bool(entry.get("is_evaluated", False)),
        set_id=entry.get("set_id"),
    )
