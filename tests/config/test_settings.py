"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from changeapply import ChangesetSettings, get_settings


def test_defaults(monkeypatch):
    for name in ("TAG_KEY", "MODIFIER_TAG", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"CHANGESET_{name}", raising=False)

    settings = ChangesetSettings(_env_file=None)

    assert settings.tag_key == "json"
    assert settings.modifier_tag == "modifiedBy"
    assert settings.log_level == "WARNING"
    assert settings.log_format == "console"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CHANGESET_MODIFIER_TAG", "updatedBy")
    monkeypatch.setenv("CHANGESET_LOG_FORMAT", "json")

    settings = ChangesetSettings(_env_file=None)

    assert settings.modifier_tag == "updatedBy"
    assert settings.log_format == "json"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        ChangesetSettings(_env_file=None, log_level="LOUD")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
