"""Schema models: capability protocols and per-type field descriptors.

Capability protocols are optional interfaces that field types can implement
to take part in coercion:

    @dataclass(frozen=True)
    class Celsius:
        degrees: float

        @classmethod
        def __decode_scalar__(cls, value: Any) -> "Celsius":
            return cls(float(value.removesuffix("C")))

        @classmethod
        def __zero__(cls) -> "Celsius":
            return cls(0.0)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Protocol, Self, runtime_checkable

from changeapply.core.errors import ChangesetConfigurationError


@runtime_checkable
class ScalarDecoder(Protocol):
    """Type that builds itself from a plain scalar (or list/dict) value."""

    @classmethod
    def __decode_scalar__(cls, value: Any) -> Self: ...


@runtime_checkable
class ZeroValue(Protocol):
    """Type that knows its own cleared value."""

    @classmethod
    def __zero__(cls) -> Self: ...


@dataclass(slots=True, frozen=True)
class FieldDescriptor:
    """Location and coercion metadata for one tagged field.

    Attributes:
        tag: External name used in changesets.
        name: Attribute name on the owning record.
        path: Attribute names leading from the target to the owning record
            (empty for fields declared directly on the target).
        annotation: Declared type with Optional stripped.
        nullable: True if the declared type admits None.
        decoder: Scalar decoder detected for the declared type, if any.
        zero: Factory for the cleared value, None if the type has none.
    """

    tag: str
    name: str
    path: tuple[str, ...]
    annotation: Any
    nullable: bool
    decoder: Callable[[Any], Any] | None = None
    zero: Callable[[], Any] | None = None

    def owner(self, record: Any) -> Any:
        """Resolve the record instance that holds this field.

        Raises:
            ChangesetConfigurationError: If an embedded record on the path is None.
        """
        owner = reduce(getattr, self.path, record)
        if owner is None:
            raise ChangesetConfigurationError(
                f"Embedded record '{'.'.join(self.path)}' is None on {type(record).__name__}"
            )
        return owner

    def read(self, record: Any) -> Any:
        return getattr(self.owner(record), self.name)

    def write(self, record: Any, value: Any) -> None:
        setattr(self.owner(record), self.name, value)


@dataclass(slots=True)
class RecordSchema:
    """Tag-to-field map for one record type, embedded records flattened."""

    record_type: type
    fields: dict[str, FieldDescriptor] = field(default_factory=dict)

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self.fields)

    def field_for(self, tag: str) -> FieldDescriptor | None:
        return self.fields.get(tag)

    def unknown_tags(self, tags: Iterable[str]) -> list[str]:
        """Tags with no matching field, in input order."""
        return [t for t in tags if t not in self.fields]
