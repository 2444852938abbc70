from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from wordwise.domain import constants as c


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/wordwise/config.toml",
        Path.home() / ".wordwise.toml",
    ]


class ScoringParams(BaseModel):
    """
    Tuning parameters of the scoring algorithm.

    Every field defaults to the value in `wordwise.domain.constants` and can
    be overridden from the config file (``[scoring]`` table) or from the
    environment (``WORDWISE_SCORING__EASY_CORRECT_DECREMENT=0.9``).
    """

    model_config = ConfigDict(frozen=True)

    # Base step sizes
    easy_correct_decrement: float = Field(default=c.EASY_CORRECT_DECREMENT, gt=0)
    medium_correct_decrement: float = Field(default=c.MEDIUM_CORRECT_DECREMENT, gt=0)
    hard_correct_decrement: float = Field(default=c.HARD_CORRECT_DECREMENT, gt=0)
    easy_incorrect_increment: float = Field(default=c.EASY_INCORRECT_INCREMENT, gt=0)
    medium_incorrect_increment: float = Field(default=c.MEDIUM_INCORRECT_INCREMENT, gt=0)
    hard_incorrect_increment: float = Field(default=c.HARD_INCORRECT_INCREMENT, gt=0)
    max_step_decrement: float = Field(default=c.MAX_STEP_DECREMENT, gt=0)
    max_step_increment: float = Field(default=c.MAX_STEP_INCREMENT, gt=0)

    # Score bands
    easy_score_threshold: float = c.EASY_SCORE_THRESHOLD
    hard_score_threshold: float = c.HARD_SCORE_THRESHOLD
    learning_rate_easy: float = Field(default=c.LEARNING_RATE_EASY, gt=0)
    learning_rate_medium: float = Field(default=c.LEARNING_RATE_MEDIUM, gt=0)
    learning_rate_hard: float = Field(default=c.LEARNING_RATE_HARD, gt=0)

    # Response speed
    easy_time_ratio: float = Field(default=c.EASY_TIME_RATIO, gt=0)
    hard_time_ratio: float = Field(default=c.HARD_TIME_RATIO, gt=0)
    fast_response_ms: float = Field(default=c.FAST_RESPONSE_MS, gt=0)
    slow_response_ms: float = Field(default=c.SLOW_RESPONSE_MS, gt=0)

    # Streaks
    streak_bonus_step: float = Field(default=c.STREAK_BONUS_STEP, ge=0)
    streak_bonus_cap: float = Field(default=c.STREAK_BONUS_CAP, ge=0)
    mastery_streak: int = Field(default=c.MASTERY_STREAK, ge=1)
    mastery_bonus: float = Field(default=c.MASTERY_BONUS, ge=0)
    consecutive_timing_step: float = Field(default=c.CONSECUTIVE_TIMING_STEP, ge=0)
    consecutive_timing_cap: float = Field(default=c.CONSECUTIVE_TIMING_CAP, ge=1)
    min_timing_factor: float = Field(default=c.MIN_TIMING_FACTOR, gt=0, le=1)

    # Recent failures
    failure_penalty_step: float = Field(default=c.FAILURE_PENALTY_STEP, ge=0)
    failure_penalty_cap: float = Field(default=c.FAILURE_PENALTY_CAP, ge=0)
    failure_lookback_responses: int = Field(default=c.FAILURE_LOOKBACK_RESPONSES, ge=0)
    failure_lookback_hours: float = Field(default=c.FAILURE_LOOKBACK_HOURS, gt=0)

    # Time decay
    time_decay_hours: float = Field(default=c.TIME_DECAY_HOURS, gt=0)
    time_decay_factor: float = Field(default=c.TIME_DECAY_FACTOR, ge=0)


class AppConfig(BaseSettings):
    """
    Configuration model for wordwise.
    Supports loading from:
    1. Environment variables (WORDWISE_*)
    2. Config file (~/.config/wordwise/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="WORDWISE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    words_file: Path = Field(default_factory=lambda: Path.home() / ".config/wordwise/words.yaml")
    set_id: str | None = None

    # Session
    advance_delay: float = Field(default=c.AUTO_ADVANCE_DELAY, ge=0)
    shuffle_seed: int | None = None

    scoring: ScoringParams = Field(default_factory=ScoringParams)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take precedence: CLI, then environment, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("words_file", mode="before")
    @classmethod
    def resolve_words_file(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/wordwise/config.toml (if exists)
    3. Environment variables (WORDWISE_*)
    4. cli_overrides (passed from Typer, None values dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
