"""Type-directed coercion of changeset values into field values.

Rules are tried in order for every value:

    0. NULL (or an unset sequence) clears the field to its zero value.
    1. A string written to a datetime field is parsed as RFC 3339.
    2. A type with a scalar decoder decodes the plain source value.
    3. Otherwise the value is assigned directly when its shape matches.

Every failure raises ValueCoercionError naming the field and the value.
"""

from __future__ import annotations

import copy
import dataclasses
import typing
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import ValidationError

from changeapply.core.changeset import Changeset
from changeapply.core.errors import UnknownFieldError, ValueCoercionError
from changeapply.core.schema import (
    FieldDescriptor,
    RecordSchema,
    SchemaRegistry,
    find_scalar_decoder,
    is_record_type,
    split_optional,
    union_members,
    validates_assignment,
    zero_factory,
)
from changeapply.core.timestamps import parse_timestamp
from changeapply.core.value import ChangeValue, ValueKind

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _type_name(tp: Any) -> str:
    return tp.__name__ if isinstance(tp, type) else str(tp)


def _mismatch(field: str, value: ChangeValue, tp: Any) -> ValueCoercionError:
    return ValueCoercionError(
        field,
        value.to_python(),
        f"{value.kind.name.lower()} value does not fit {_type_name(tp)}",
    )


def coerce_field(
    descriptor: FieldDescriptor,
    value: ChangeValue,
    registry: SchemaRegistry,
    current: Any = None,
    field: str | None = None,
) -> Any:
    """Coerce a value for a resolved field, using its precomputed capabilities.

    Args:
        descriptor: Target field.
        value: Normalized changeset value.
        registry: Schema registry used for nested records.
        current: Current field value (nested records are patched onto a copy).
        field: Name used in errors. Defaults to the descriptor's tag.

    Returns:
        Value ready to assign.

    Raises:
        ValueCoercionError: If the value cannot be converted.
        UnknownFieldError: If a nested record mapping names unknown tags.
    """
    return _coerce(
        value,
        descriptor.annotation,
        field or descriptor.tag,
        registry,
        decoder=descriptor.decoder,
        zero=descriptor.zero,
        current=current,
    )


def coerce_to_type(
    value: ChangeValue,
    annotation: Any,
    field: str,
    registry: SchemaRegistry,
    current: Any = None,
) -> Any:
    """Coerce a value to an arbitrary annotation (container items, union members)."""
    tp, nullable = split_optional(annotation)
    return _coerce(
        value,
        tp,
        field,
        registry,
        decoder=find_scalar_decoder(tp),
        zero=zero_factory(tp, nullable),
        current=current,
    )


def _coerce(
    value: ChangeValue,
    tp: Any,
    field: str,
    registry: SchemaRegistry,
    *,
    decoder: Callable[[Any], Any] | None,
    zero: Callable[[], Any] | None,
    current: Any,
) -> Any:
    if value.is_null() or value.is_unset_sequence():
        if zero is None:
            raise ValueCoercionError(field, None, f"{_type_name(tp)} cannot be cleared")
        return zero()

    if tp is datetime and value.kind is ValueKind.STRING:
        try:
            return parse_timestamp(value.payload)
        except ValueError as e:
            raise ValueCoercionError(field, value.payload, "malformed RFC 3339 timestamp") from e

    if decoder is not None:
        if value.kind is ValueKind.NATIVE and isinstance(value.payload, tp):
            return value.payload
        raw = value.to_python()
        try:
            return decoder(raw)
        except Exception as e:
            raise ValueCoercionError(field, raw, str(e) or type(e).__name__) from e

    return _assign_direct(value, tp, field, registry, current)


def _assign_direct(
    value: ChangeValue,
    tp: Any,
    field: str,
    registry: SchemaRegistry,
    current: Any,
) -> Any:
    if tp is Any or tp is object:
        return value.to_python()

    members = union_members(tp)
    if members is not None:
        return _coerce_union(value, members, tp, field, registry)

    origin = typing.get_origin(tp) or tp
    args = typing.get_args(tp)
    kind = value.kind
    payload = value.payload

    if kind is ValueKind.NATIVE:
        if isinstance(origin, type) and isinstance(payload, origin):
            return payload
        raise _mismatch(field, value, tp)

    if isinstance(origin, type) and issubclass(origin, Enum):
        if kind in (ValueKind.STRING, ValueKind.NUMBER):
            try:
                return origin(payload)
            except ValueError as e:
                raise ValueCoercionError(field, payload, f"not a valid {origin.__name__}") from e
        raise _mismatch(field, value, tp)

    if origin is str and kind is ValueKind.STRING:
        return payload
    if origin is bool and kind is ValueKind.BOOLEAN:
        return payload
    if origin is int and kind is ValueKind.NUMBER:
        if isinstance(payload, int):
            return payload
        if payload.is_integer():
            return int(payload)
        raise ValueCoercionError(field, payload, "expected an integral number")
    if origin is float and kind is ValueKind.NUMBER:
        return float(payload)

    if origin in _SEQUENCE_TYPES and kind is ValueKind.SEQUENCE:
        return _coerce_sequence(payload, origin, args, field, registry)
    if origin is dict and kind is ValueKind.MAPPING:
        key_type, item_type = args if len(args) == 2 else (Any, Any)
        return {
            coerce_to_type(ChangeValue.of(key), key_type, f"{field}.{key}", registry): (
                coerce_to_type(item, item_type, f"{field}.{key}", registry)
            )
            for key, item in payload.items()
        }
    if is_record_type(origin) and kind is ValueKind.MAPPING:
        return _coerce_record(value, origin, field, registry, current)

    raise _mismatch(field, value, tp)


def _coerce_union(
    value: ChangeValue,
    members: tuple[Any, ...],
    tp: Any,
    field: str,
    registry: SchemaRegistry,
) -> Any:
    """Try each union member in declaration order, first fit wins."""
    last_error: ValueCoercionError | None = None
    for member in members:
        try:
            return coerce_to_type(value, member, field, registry)
        except ValueCoercionError as e:
            last_error = e
    raise ValueCoercionError(
        field, value.to_python(), f"fits none of {_type_name(tp)}"
    ) from last_error


def _coerce_sequence(
    items: tuple[ChangeValue, ...],
    origin: type,
    args: tuple[Any, ...],
    field: str,
    registry: SchemaRegistry,
) -> Any:
    if origin is tuple and args and (len(args) != 2 or args[1] is not Ellipsis):
        # Fixed-length tuple: tuple[int, str]
        if len(items) != len(args):
            raise ValueCoercionError(
                field,
                [item.to_python() for item in items],
                f"expected {len(args)} items, got {len(items)}",
            )
        return tuple(
            coerce_to_type(item, item_type, f"{field}[{i}]", registry)
            for i, (item, item_type) in enumerate(zip(items, args, strict=True))
        )

    item_type = args[0] if args else Any
    return origin(
        coerce_to_type(item, item_type, f"{field}[{i}]", registry) for i, item in enumerate(items)
    )


def _coerce_record(
    value: ChangeValue,
    record_type: type,
    field: str,
    registry: SchemaRegistry,
    current: Any,
) -> Any:
    """Patch a mapping onto a copy of the current nested record, or build one."""
    nested = Changeset(value.payload)
    schema = registry.resolve(record_type)

    if isinstance(current, record_type):
        clone = copy.deepcopy(current)
        write_changes(plan_changes(schema, nested, registry, target=clone, prefix=f"{field}."), clone)
        return clone

    if not dataclasses.is_dataclass(record_type):
        raw = value.to_python()
        try:
            return record_type.model_validate(raw)  # type: ignore[attr-defined]
        except ValueError as e:
            raise ValueCoercionError(field, raw, f"invalid {record_type.__name__}: {e}") from e

    planned = plan_changes(schema, nested, registry, prefix=f"{field}.")
    kwargs: dict[str, Any] = {}
    for descriptor, item in planned:
        if descriptor.path:
            raise ValueCoercionError(
                field,
                value.to_python(),
                f"cannot build {record_type.__name__} with embedded fields from a mapping",
            )
        kwargs[descriptor.name] = item
    try:
        return record_type(**kwargs)
    except TypeError as e:
        raise ValueCoercionError(field, value.to_python(), str(e)) from e


def plan_changes(
    schema: RecordSchema,
    changes: Changeset,
    registry: SchemaRegistry,
    target: Any = None,
    prefix: str = "",
) -> list[tuple[FieldDescriptor, Any]]:
    """Resolve and coerce every entry before anything is written.

    Args:
        schema: Schema of the record being patched.
        changes: Normalized changeset.
        registry: Schema registry used for nested records.
        target: Record being patched, used to read current nested values.
        prefix: Prepended to tags in error messages (nested records).

    Returns:
        (field, coerced value) pairs in changeset order.

    Raises:
        UnknownFieldError: If any tag has no matching field.
        ValueCoercionError: If any value cannot be converted, or a Pydantic
            target with validate_assignment rejects it.
    """
    unknown = schema.unknown_tags(changes)
    if unknown:
        raise UnknownFieldError((f"{prefix}{key}" for key in unknown), schema.record_type)

    planned: list[tuple[FieldDescriptor, Any]] = []
    staged: dict[int, Any] = {}
    for key, value in changes.items():
        descriptor = schema.fields[key]
        current = descriptor.read(target) if target is not None else None
        coerced = coerce_field(descriptor, value, registry, current, f"{prefix}{key}")
        if target is not None:
            _stage_assignment(descriptor, coerced, value, target, staged, f"{prefix}{key}")
        planned.append((descriptor, coerced))
    return planned


def _stage_assignment(
    descriptor: FieldDescriptor,
    coerced: Any,
    value: ChangeValue,
    target: Any,
    staged: dict[int, Any],
    field: str,
) -> None:
    """Run Pydantic assignment validation against a copy of the owning record.

    Copies are shared per owner so later fields see earlier staged values.
    """
    owner = descriptor.owner(target)
    if not validates_assignment(type(owner)):
        return
    staged_owner = staged.get(id(owner))
    if staged_owner is None:
        staged_owner = staged[id(owner)] = owner.model_copy()
    try:
        owner.__pydantic_validator__.validate_assignment(staged_owner, descriptor.name, coerced)
    except ValidationError as e:
        reason = "; ".join(error["msg"] for error in e.errors())
        raise ValueCoercionError(field, value.to_python(), reason) from e


def write_changes(planned: list[tuple[FieldDescriptor, Any]], target: Any) -> None:
    """Assign coerced values onto the target in place."""
    for descriptor, value in planned:
        descriptor.write(target, value)
