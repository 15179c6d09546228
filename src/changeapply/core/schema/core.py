"""Schema registry, field tag helpers, and scalar decoder registration.

Usage:
    @dataclass
    class Audit:
        created_by: str = tag("createdBy", default="")

    @dataclass
    class Report:
        audit: Audit = embedded(default_factory=Audit)
        city: str = tag("city", default="")

    schema = get_registry().resolve(Report)
    schema.field_for("createdBy").path  # ("audit",)
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Union
from uuid import UUID

from changeapply.core.errors import ChangesetConfigurationError
from changeapply.core.schema.models import FieldDescriptor, RecordSchema, ScalarDecoder, ZeroValue
from changeapply.core.timestamps import ZERO_TIMESTAMP

EMBEDDED_KEY = "embedded"


def _default_tag_key() -> str:
    # Late import so schema can be used without touching settings at import time
    from changeapply.config import get_settings

    return get_settings().tag_key


def tag(name: str, *, key: str | None = None, **field_kwargs: Any) -> Any:
    """Declare a dataclass field with an external tag.

    Args:
        name: Tag used in changesets (e.g. "createdBy").
        key: Metadata key to store the tag under. Defaults to settings.tag_key.
        **field_kwargs: Forwarded to dataclasses.field (default, default_factory, ...).

    Returns:
        A dataclasses.Field.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[key or _default_tag_key()] = name
    return dataclasses.field(metadata=metadata, **field_kwargs)


def embedded(**field_kwargs: Any) -> Any:
    """Declare a dataclass field whose record fields are flattened into the parent."""
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED_KEY] = True
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def is_record_type(tp: Any) -> bool:
    """True for dataclass types and Pydantic model classes."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or _is_pydantic(tp)


def is_frozen(cls: type) -> bool:
    if dataclasses.is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    return bool(getattr(cls, "model_config", {}).get("frozen", False))


def validates_assignment(cls: type) -> bool:
    """True for Pydantic models configured with validate_assignment."""
    if not _is_pydantic(cls):
        return False
    return bool(getattr(cls, "model_config", {}).get("validate_assignment", False))


# Scalar decoders


def _decode_uuid(value: Any) -> UUID:
    if not isinstance(value, str):
        raise TypeError(f"expected a UUID string, got {type(value).__name__}")
    return UUID(value)


def _decode_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TypeError(f"expected a decimal string or number, got {type(value).__name__}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"invalid decimal {value!r}") from e


_scalar_decoders: dict[type, Callable[[Any], Any]] = {
    UUID: _decode_uuid,
    Decimal: _decode_decimal,
}


def register_scalar_decoder(tp: type, decoder: Callable[[Any], Any]) -> None:
    """Register a decoder for a type that cannot implement ScalarDecoder itself.

    Schemas resolved before registration keep their detected decoders; call
    ``get_registry().clear()`` to pick up the new one.

    Args:
        tp: Destination type.
        decoder: Callable taking the plain source value, returning a ``tp``.
    """
    _scalar_decoders[tp] = decoder


def find_scalar_decoder(tp: Any) -> Callable[[Any], Any] | None:
    """Find the decode-from-scalar capability for a type.

    A type's own ``__decode_scalar__`` wins over registered decoders, which
    are matched along the MRO.

    Returns:
        The decoder, or None if the type has no such capability.
    """
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return None
    if issubclass(tp, ScalarDecoder):
        return tp.__decode_scalar__
    for base in tp.__mro__:
        if base in _scalar_decoders:
            return _scalar_decoders[base]
    return None


# Type analysis


def strip_annotated(tp: Any) -> Any:
    while typing.get_origin(tp) is Annotated:
        tp = typing.get_args(tp)[0]
    return tp


def union_members(tp: Any) -> tuple[Any, ...] | None:
    """Members of a Union / ``X | Y`` annotation, or None if not a union."""
    if typing.get_origin(tp) in (Union, types.UnionType):
        return typing.get_args(tp)
    return None


def split_optional(tp: Any) -> tuple[Any, bool]:
    """Split ``X | None`` into (X, True); other types into (tp, False)."""
    tp = strip_annotated(tp)
    members = union_members(tp)
    if members is None or type(None) not in members:
        return tp, False
    rest = tuple(strip_annotated(m) for m in members if m is not type(None))
    if len(rest) == 1:
        return rest[0], True
    return Union[rest], True  # noqa: UP007


_ZERO_FACTORIES: dict[type, Callable[[], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: bool,
    Decimal: Decimal,
    UUID: lambda: UUID(int=0),
    datetime: lambda: ZERO_TIMESTAMP,
}

_CONTAINERS: dict[Any, type] = {
    list: list,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    dict: dict,
}


def zero_factory(tp: Any, nullable: bool = False) -> Callable[[], Any] | None:
    """Factory for the value a field of type ``tp`` takes when cleared.

    Args:
        tp: Declared type, Optional already stripped.
        nullable: Whether the field admits None.

    Returns:
        Zero-value factory, or None if the type has no zero value.
    """
    if nullable or tp is Any:
        return lambda: None
    container = _CONTAINERS.get(typing.get_origin(tp) or tp)
    if container is not None:
        return container
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        if issubclass(tp, ZeroValue):
            return tp.__zero__
        if issubclass(tp, Enum):
            return None
        for base in tp.__mro__:
            if base in _ZERO_FACTORIES:
                return _ZERO_FACTORIES[base]
    return None


# Registry


class SchemaRegistry:
    """Process-local cache of RecordSchema per record type.

    Schemas are built on first use and reused for every later application
    against the same type.

    Args:
        tag_key: Dataclass metadata key holding field tags. Defaults to settings.tag_key.
    """

    def __init__(self, tag_key: str | None = None) -> None:
        self._tag_key = tag_key
        self._by_type: dict[type, RecordSchema] = {}

    @property
    def tag_key(self) -> str:
        return self._tag_key or _default_tag_key()

    def resolve(self, cls: type) -> RecordSchema:
        """Return the cached schema for ``cls``, building it on first use.

        Args:
            cls: Dataclass or Pydantic model class.

        Returns:
            Schema mapping every tag (embedded records flattened) to its field.

        Raises:
            ChangesetConfigurationError: If cls is not a mutable record type, or
                two fields share a tag.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        schema = RecordSchema(record_type=cls)
        self._collect(cls, (), schema, seen=(cls,))
        self._by_type[cls] = schema
        return schema

    def get(self, cls: type) -> RecordSchema | None:
        return self._by_type.get(cls)

    def is_resolved(self, cls: type) -> bool:
        return cls in self._by_type

    def clear(self) -> None:
        self._by_type.clear()

    def _collect(
        self,
        cls: type,
        path: tuple[str, ...],
        schema: RecordSchema,
        seen: tuple[type, ...],
    ) -> None:
        if not is_record_type(cls):
            raise ChangesetConfigurationError(
                f"{getattr(cls, '__name__', cls)!s} is not a dataclass or Pydantic model"
            )
        if is_frozen(cls):
            raise ChangesetConfigurationError(f"{cls.__name__} is frozen and cannot be patched")

        for name, field_tag, annotation, is_embedded in self._fields_of(cls):
            if is_embedded:
                inner, nullable = split_optional(annotation)
                if nullable or not is_record_type(inner):
                    raise ChangesetConfigurationError(
                        f"Embedded field {cls.__name__}.{name} must be a non-optional record type"
                    )
                if inner in seen:
                    raise ChangesetConfigurationError(
                        f"Embedded field {cls.__name__}.{name} embeds {inner.__name__} recursively"
                    )
                self._collect(inner, (*path, name), schema, seen=(*seen, inner))
                continue

            if field_tag in schema.fields:
                existing = schema.fields[field_tag]
                raise ChangesetConfigurationError(
                    f"Tag '{field_tag}' is declared by both "
                    f"{'.'.join((*existing.path, existing.name))} and {'.'.join((*path, name))} "
                    f"on {schema.record_type.__name__}"
                )

            value_type, nullable = split_optional(annotation)
            schema.fields[field_tag] = FieldDescriptor(
                tag=field_tag,
                name=name,
                path=path,
                annotation=value_type,
                nullable=nullable,
                decoder=find_scalar_decoder(value_type),
                zero=zero_factory(value_type, nullable),
            )

    def _fields_of(self, cls: type) -> list[tuple[str, str, Any, bool]]:
        """List (attribute name, tag, annotation, embedded) for a record type."""
        if dataclasses.is_dataclass(cls):
            try:
                hints = typing.get_type_hints(cls, include_extras=True)
            except NameError as e:
                raise ChangesetConfigurationError(
                    f"Cannot resolve annotations of {cls.__name__}: {e}"
                ) from e
            return [
                (
                    f.name,
                    f.metadata.get(self.tag_key, f.name),
                    hints.get(f.name, Any),
                    bool(f.metadata.get(EMBEDDED_KEY, False)),
                )
                for f in dataclasses.fields(cls)
            ]

        result: list[tuple[str, str, Any, bool]] = []
        for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            result.append(
                (name, info.alias or name, info.annotation, bool(extra.get(EMBEDDED_KEY, False)))
            )
        return result


# Module-level registry instance
_registry = SchemaRegistry()


def get_registry() -> SchemaRegistry:
    """Access the global schema registry.

    Returns:
        The process-local SchemaRegistry instance.
    """
    return _registry
