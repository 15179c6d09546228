"""Tests for the ordered coercion rules."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from changeapply import ChangeValue, UnknownFieldError, ValueCoercionError, tag
from changeapply.core import coerce_to_type
from tests.records import Celsius, Condition, Station


def coerce(raw, annotation, registry, current=None):
    return coerce_to_type(ChangeValue.of(raw), annotation, "field", registry, current)


@pytest.mark.parametrize(
    ("raw", "annotation", "expected"),
    [
        ("Hail", str, "Hail"),
        (True, bool, True),
        (3, int, 3),
        (3.0, int, 3),
        (3, float, 3.0),
        ("storm", Condition, Condition.STORM),
        (["a", "b"], list[str], ["a", "b"]),
        ([1, 2], tuple[int, ...], (1, 2)),
        ([1, "x"], tuple[int, str], (1, "x")),
        ([1, 1, 2], set[int], {1, 2}),
        ({"a": 1}, dict[str, int], {"a": 1}),
        ({"a": [1]}, Any, {"a": [1]}),
        ("x", int | str, "x"),
        (4, int | str, 4),
        ("21.5C", Celsius, Celsius(21.5)),
        ("12345678-1234-5678-1234-567812345678", UUID, UUID("12345678-1234-5678-1234-567812345678")),
        ("1.10", Decimal, Decimal("1.10")),
        (None, str, ""),
        (None, str | None, None),
        (None, list[int], []),
        (None, Celsius, Celsius(0.0)),
    ],
)
def test_coercion(raw, annotation, expected, registry):
    assert coerce(raw, annotation, registry) == expected


def test_timestamp_string_is_parsed(registry):
    assert coerce("2024-01-02T03:04:05.5Z", datetime, registry) == datetime(
        2024, 1, 2, 3, 4, 5, 500000, tzinfo=UTC
    )


def test_malformed_timestamp_names_field_and_value(registry):
    with pytest.raises(ValueCoercionError) as excinfo:
        coerce("not-a-date", datetime, registry)

    assert excinfo.value.field == "field"
    assert excinfo.value.value == "not-a-date"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_native_values_assigned_when_type_matches(registry):
    now = datetime.now(UTC)
    uid = UUID(int=7)

    assert coerce(now, datetime, registry) is now
    assert coerce(uid, UUID, registry) is uid


def test_decoder_error_is_wrapped(registry):
    with pytest.raises(ValueCoercionError, match="expected a temperature") as excinfo:
        coerce("hot", Celsius, registry)

    assert isinstance(excinfo.value.__cause__, ValueError)


@pytest.mark.parametrize(
    ("raw", "annotation"),
    [
        (1, str),
        ("1", int),
        (True, int),
        (1.5, int),
        ("yes", bool),
        ("cloudy", Condition),
        ("x", list[str]),
        ([1], list[str]),
        ({"a": "b"}, dict[str, int]),
        ([1, 2, 3], tuple[int, str]),
        ([], int | str),
        (datetime.now(UTC), str),
        (12, UUID),
        (12, datetime),
    ],
)
def test_shape_mismatch_raises(raw, annotation, registry):
    with pytest.raises(ValueCoercionError):
        coerce(raw, annotation, registry)


def test_null_without_zero_value_raises(registry):
    with pytest.raises(ValueCoercionError, match="cannot be cleared"):
        coerce(None, Condition, registry)


def test_item_errors_name_position(registry):
    with pytest.raises(ValueCoercionError) as excinfo:
        coerce(["a", 2], list[str], registry)

    assert excinfo.value.field == "field[1]"


def test_mapping_patches_copy_of_current_record(registry):
    current = Station(name="KPIE", elevation=3)

    result = coerce({"elevation": 5}, Station, registry, current=current)

    assert result == Station(name="KPIE", elevation=5)
    assert result is not current
    assert current.elevation == 3


def test_mapping_builds_record_when_current_is_none(registry):
    assert coerce({"name": "KTPA"}, Station | None, registry) == Station(name="KTPA")


def test_mapping_with_unknown_nested_tag(registry):
    with pytest.raises(UnknownFieldError) as excinfo:
        coerce({"altitude": 1}, Station, registry, current=Station())

    assert excinfo.value.keys == ("field.altitude",)


def test_mapping_missing_required_constructor_args(registry):
    @dataclass
    class Required:
        code: str = tag("code")
        label: str = tag("label", default="")

    with pytest.raises(ValueCoercionError):
        coerce({"label": "x"}, Required, registry)
