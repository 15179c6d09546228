"""Changeset model: sparse mapping of field tag to classified value.

Usage:
    changes = Changeset.from_dict({"weather": "Thunderstorms", "tags": []})
    changes["modifiedBy"] = "Mr. Weatherdude"  # classified on write
    changes["weather"].kind  # ValueKind.STRING
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from changeapply.core.value import ChangeValue


class Changeset(MutableMapping[str, ChangeValue]):
    """Partial update request, consumed once by an applier.

    Raw values are classified into ChangeValue when they are stored, so the
    normalizer and applier never inspect raw Python types.

    Args:
        data: Optional initial entries (raw values or ChangeValue).
    """

    __slots__ = ("_entries",)

    def __init__(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        self._entries: dict[str, ChangeValue] = {}
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Changeset:
        """Build a changeset from a decoded request body."""
        return cls(raw)

    def __getitem__(self, key: str) -> ChangeValue:
        return self._entries[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Changeset keys must be str, got {type(key).__name__}")
        self._entries[key] = ChangeValue.of(value)

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Changeset({self.to_dict()!r})"

    def copy(self) -> Changeset:
        """Independent changeset with the same entries.

        ChangeValue is immutable, so sharing entries is safe.
        """
        clone = Changeset()
        clone._entries = dict(self._entries)
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Unwrap all entries to plain Python data."""
        return {key: value.to_python() for key, value in self._entries.items()}


def as_changeset(changes: Changeset | Mapping[str, Any]) -> Changeset:
    """Return ``changes`` if already a Changeset, otherwise classify a copy.

    Args:
        changes: Changeset or plain mapping of tag to raw value.

    Returns:
        A Changeset. Plain mappings are converted, not mutated.
    """
    if isinstance(changes, Changeset):
        return changes
    return Changeset.from_dict(changes)
