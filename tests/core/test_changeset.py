"""Tests for the changeset model and normalization."""

import pytest

from changeapply import UNSET_SEQUENCE, Changeset, ChangeValue, ValueKind, sanitize_changes
from changeapply.core import as_changeset, normalize_value


def test_values_are_classified_on_write():
    changes = Changeset()
    changes["weather"] = "Thunderstorms"

    assert changes["weather"] == ChangeValue(ValueKind.STRING, "Thunderstorms")


def test_from_dict_and_to_dict():
    raw = {"weather": "Thunderstorms", "tags": ["a"], "count": 2}
    changes = Changeset.from_dict(raw)

    assert len(changes) == 3
    assert changes.to_dict() == raw


def test_non_string_key_rejected():
    with pytest.raises(TypeError, match="keys must be str"):
        Changeset()[1] = "x"  # type: ignore[index]


def test_copy_is_independent():
    original = Changeset(weather="Hot")
    clone = original.copy()
    clone["modifiedBy"] = "someone"

    assert "modifiedBy" not in original
    assert clone["weather"] is original["weather"]


def test_as_changeset_returns_existing_changeset():
    changes = Changeset(a=1)
    assert as_changeset(changes) is changes


def test_as_changeset_leaves_plain_mapping_untouched():
    raw = {"city": ""}
    changes = as_changeset(raw)
    sanitize_changes(changes)

    assert raw == {"city": ""}
    assert changes["city"].is_null()


@pytest.mark.parametrize(
    ("raw", "expect_null"),
    [
        ("", True),
        (UNSET_SEQUENCE, True),
        ([], False),
        ("text", False),
        (0, False),
        (False, False),
        ({}, False),
        (None, True),
    ],
    ids=["empty-str", "unset-seq", "empty-seq", "str", "zero", "false", "empty-map", "null"],
)
def test_normalize_value(raw, expect_null):
    assert normalize_value(ChangeValue.of(raw)).is_null() is expect_null


def test_sanitize_changes_rewrites_in_place():
    changes = Changeset(city="", tags=UNSET_SEQUENCE, labels=[], weather="Hail", notes=None)

    rewritten = sanitize_changes(changes)

    assert rewritten == ["city", "tags"]
    assert changes["city"].is_null()
    assert changes["tags"].is_null()
    assert changes["labels"] == ChangeValue(ValueKind.SEQUENCE, ())
    assert changes["weather"].payload == "Hail"
    assert changes["notes"].is_null()


def test_sanitize_leaves_nested_values_alone():
    """Only top-level entries are normalized."""
    changes = Changeset(station={"name": ""})
    sanitize_changes(changes)

    assert changes["station"].payload["name"].payload == ""
