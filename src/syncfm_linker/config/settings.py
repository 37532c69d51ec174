"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


IGNORE_DOTENV_ENV_VAR = "SYNCFM_LINKER_IGNORE_DOTENV"
DEFAULT_SYNCFM_BASE_URL = "https://syncfm.dev"


class AppSettings(BaseSettings):
    """Centralized configuration values for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    syncfm_base_url: str = Field(default=DEFAULT_SYNCFM_BASE_URL, alias="SYNCFM_BASE_URL")
    syncfm_timeout_seconds: float = Field(default=10.0, alias="SYNCFM_TIMEOUT_SECONDS")
    enable_standard_youtube: bool = Field(default=False, alias="SYNCFM_ENABLE_YOUTUBE")
    analytics_enabled: bool = Field(default=False, alias="ANALYTICS_ENABLED")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


def load_settings(*, ignore_dotenv: Optional[bool] = None) -> AppSettings:
    """Read application settings from the environment without caching.

    Parameters
    ----------
    ignore_dotenv:
        Explicitly control whether the `.env` file should be ignored. When ``None``
        (the default), the environment variable ``SYNCFM_LINKER_IGNORE_DOTENV``
        controls the behavior (case-insensitive truthy values disable the file).
    """

    if ignore_dotenv is None:
        env_override = os.getenv(IGNORE_DOTENV_ENV_VAR, "")
        ignore_dotenv = env_override.lower() in {"1", "true", "yes", "on"}

    if ignore_dotenv:
        return AppSettings(_env_file=None)  # type: ignore[call-arg]

    return AppSettings()


@lru_cache
def get_settings(*, ignore_dotenv: Optional[bool] = None) -> AppSettings:
    """Return a cached instance of application settings, read once at startup."""

    return load_settings(ignore_dotenv=ignore_dotenv)
