"""Environment-based settings.

Example:
    >>> # FORMSTATE_LOG_LEVEL=DEBUG
    >>> # FORMSTATE_STORAGE_DIR=./.forms
    >>> settings = FormStateSettings()
    >>> settings.log_level
    'DEBUG'
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from formstate.models.rules import Trigger

__all__ = ["FormStateSettings", "get_settings"]


class FormStateSettings(BaseSettings):
    """Settings read from ``FORMSTATE_*`` environment variables and ``.env``."""

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: 'json' or 'console'")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")
    default_update_on: Trigger = Field(
        default=Trigger.CHANGE,
        description="Trigger used by schema files that do not set update_on",
    )
    storage_dir: str = Field(default="./.formstate", description="Directory for JsonFileStorage")

    model_config = SettingsConfigDict(
        env_prefix="FORMSTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v.lower()

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"


def get_settings() -> FormStateSettings:
    """Read settings from the current environment."""
    return FormStateSettings()
