"""Tests for changeset value classification."""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from changeapply import UNSET_SEQUENCE, ChangeValue, ValueKind

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats(allow_nan=False) | st.text(),
    lambda children: st.lists(children) | st.dictionaries(st.text(), children),
    max_leaves=10,
)


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        (None, ValueKind.NULL),
        ("", ValueKind.STRING),
        ("Thunderstorms", ValueKind.STRING),
        (True, ValueKind.BOOLEAN),
        (0, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        ([], ValueKind.SEQUENCE),
        ((1, 2), ValueKind.SEQUENCE),
        ({"a": 1}, ValueKind.MAPPING),
        (datetime(2024, 1, 2, tzinfo=UTC), ValueKind.NATIVE),
    ],
    ids=["null", "empty-str", "str", "bool", "int", "float", "list", "tuple", "dict", "native"],
)
def test_classification(raw, kind):
    assert ChangeValue.of(raw).kind is kind


def test_bool_is_not_a_number():
    """bool subclasses int but must classify as BOOLEAN."""
    assert ChangeValue.of(False).kind is ValueKind.BOOLEAN


def test_unset_sequence_differs_from_empty_sequence():
    unset = ChangeValue.of(UNSET_SEQUENCE)
    empty = ChangeValue.of([])

    assert unset.kind is ValueKind.SEQUENCE
    assert unset.is_unset_sequence()
    assert empty.kind is ValueKind.SEQUENCE
    assert not empty.is_unset_sequence()
    assert empty.payload == ()


def test_change_value_passes_through():
    value = ChangeValue.of("x")
    assert ChangeValue.of(value) is value


def test_nested_items_are_classified():
    value = ChangeValue.of({"tags": ["a", None]})

    tags = value.payload["tags"]
    assert tags.kind is ValueKind.SEQUENCE
    assert [item.kind for item in tags.payload] == [ValueKind.STRING, ValueKind.NULL]


def test_non_string_mapping_keys_rejected():
    with pytest.raises(TypeError, match="keys must be str"):
        ChangeValue.of({1: "x"})


def test_unset_sequence_unwraps_to_none():
    assert ChangeValue.unset_sequence().to_python() is None


@given(json_values)
def test_to_python_restores_json_data(raw):
    """Classifying then unwrapping JSON-like data is lossless (tuples become lists)."""
    assert ChangeValue.of(raw).to_python() == raw
