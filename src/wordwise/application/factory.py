"""
Study Session Factory
Centralizes wiring the session manager to its adapters from configuration.
"""

import random

from wordwise.application.config import AppConfig
from wordwise.application.study.session import StudySessionManager
from wordwise.domain.study.ports import Scheduler
from wordwise.infrastructure.adapters.yaml_words import YamlWordRepository


def get_word_repository(config: AppConfig) -> YamlWordRepository:
    return YamlWordRepository(config.words_file)


def get_session_manager(
    config: AppConfig,
    repository: YamlWordRepository | None = None,
    scheduler: Scheduler | None = None,
) -> StudySessionManager:
    """
    Returns a StudySessionManager persisting through the configured word file.

    A fixed `shuffle_seed` makes the study order reproducible.
    """
    repo = repository or get_word_repository(config)
    return StudySessionManager(
        difficulty_updater=repo,
        scheduler=scheduler,
        rng=random.Random(config.shuffle_seed),
        params=config.scoring,
        advance_delay=config.advance_delay,
    )
