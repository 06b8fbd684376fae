"""FRCPM configuration.

Application settings loaded from environment variables with FRCPM_ prefix.

Example:
    >>> from frcpm.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.worker_count
    4
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with FRCPM_ prefix.

    Example:
        >>> from frcpm.core.config import Settings
        >>> s = Settings(database_url="sqlite:///test.db")
        >>> s.database_url
        'sqlite:///test.db'
        >>> s.shutdown_timeout
        10.0
    """

    model_config = SettingsConfigDict(
        env_prefix="FRCPM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Background execution
    worker_count: int = Field(default=4, ge=1, le=64, description="Fixed worker pool size")
    shutdown_timeout: float = Field(default=10.0, ge=0.0, description="Seconds to wait for the loop on close")

    # Database
    database_url: str = Field(default="sqlite:///./data/frcpm.db", description="Database connection URL")
    database_echo: bool = Field(default=False, description="Log SQL statements")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "plain"] = Field(default="console", description="Log format: console or plain")

    # The Blue Alliance
    tba_base_url: str = Field(default="https://www.thebluealliance.com/api/v3")
    tba_api_key: str | None = Field(default=None, description="X-TBA-Auth-Key value")
    team_number: str | None = Field(default=None, description="Our team number, e.g. '254'")

    # FIRST events API
    frc_base_url: str = Field(default="https://frc-api.firstinspires.org/v3.0")
    frc_api_username: str | None = Field(default=None)
    frc_api_key: str | None = Field(default=None)

    http_timeout: float = Field(default=30.0, ge=1.0)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from frcpm.core.config import get_settings
        >>> s = get_settings(worker_count=2)
        >>> s.worker_count
        2
    """
    return Settings(**overrides)
