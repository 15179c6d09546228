"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from changeapply.config import ChangesetSettings, get_settings

    # Load from environment variables (CHANGESET_*)
    settings = get_settings()

    # Or override with explicit values
    settings = ChangesetSettings(modifier_tag="updatedBy")
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json"]


class ChangesetSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for changeset application.

    Attributes:
        tag_key: Dataclass field-metadata key holding a field's external tag.
        modifier_tag: Tag written by apply_changes_with_modifier.
        log_level: Minimum level emitted by setup_logging.
        log_format: "json" for production, "console" for development.

    Environment Variables:
        CHANGESET_TAG_KEY
        CHANGESET_MODIFIER_TAG
        CHANGESET_LOG_LEVEL
        CHANGESET_LOG_FORMAT
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGESET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tag_key: str = "json"
    modifier_tag: str = "modifiedBy"
    log_level: LogLevel = "WARNING"
    log_format: LogFormat = "console"


@lru_cache(maxsize=1)
def get_settings() -> ChangesetSettings:
    """Process-wide settings, loaded once.

    Returns:
        Cached ChangesetSettings. Call ``get_settings.cache_clear()`` to reload.
    """
    return ChangesetSettings()
