"""Configuration module using Pydantic Settings.

Usage:
    from changeapply.config import ChangesetSettings, get_settings

    settings = get_settings()
    custom = ChangesetSettings(modifier_tag="updatedBy")
"""

from changeapply.config.settings import ChangesetSettings, LogFormat, LogLevel, get_settings

__all__ = [
    "ChangesetSettings",
    "LogFormat",
    "LogLevel",
    "get_settings",
]
