"""
Central engine configuration using pydantic-settings.

Environment variables (prefix: STONEBID_):
    STONEBID_STARTING_CREDITS   - credits each player starts with (default: 100)
    STONEBID_CLOCK_MINUTES      - per-player clock in minutes (default: 10)
    STONEBID_MAX_STONES         - placement cap per player (default: 10)
    STONEBID_CROSS_HALF_UNLOCK  - allow unlocked squares in the other half (default: true)
    STONEBID_LOG_LEVEL          - logging level for the CLI (default: INFO)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class EngineSettings(BaseSettings):
    """Defaults for new games, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="STONEBID_",
    )

    starting_credits: int = Field(
        default=100,
        ge=0,
        description="Credits each player starts the game with.",
    )
    clock_minutes: float = Field(
        default=10.0,
        gt=0,
        description="Thinking time per player, in minutes.",
    )
    max_stones: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Maximum number of stones a player may place.",
    )
    cross_half_unlock: bool = Field(
        default=True,
        description="Allow placing on opponent-half squares unlocked by the opponent.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name used by the command line tools.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        """Upper-case the level name and reject names logging does not know."""
        if not value:
            return "INFO"
        name = str(value).strip().upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return name


@lru_cache
def get_settings() -> EngineSettings:
    """Return cached engine settings instance."""
    return EngineSettings()
