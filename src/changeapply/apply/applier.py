"""Apply changesets onto records in place.

Usage:
    report = WeatherReport(...)

    apply_changes({"weather": "Thunderstorms"}, report)
    apply_changes_with_modifier({"weather": "Hail"}, "Mr. Weatherdude", report)

Every call normalizes the changeset, resolves all tags, coerces all values,
and only then writes to the target. Unknown tags and coercion failures raise
before anything is written.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from changeapply.config import ChangesetSettings, get_settings
from changeapply.core.changeset import Changeset, as_changeset, sanitize_changes
from changeapply.core.coercion import plan_changes, write_changes
from changeapply.core.errors import ChangesetConfigurationError, ChangesetError
from changeapply.core.schema import SchemaRegistry, get_registry, is_record_type
from changeapply.observability import ensure_logging, get_logger

logger = get_logger(__name__)


class ChangeApplier:
    """Applies sparse changesets to dataclass or Pydantic record instances.

    Args:
        registry: Schema cache. Defaults to the process-wide registry.
        settings: Settings. Defaults to get_settings().
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        settings: ChangesetSettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._registry = registry if registry is not None else get_registry()

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def modifier_tag(self) -> str:
        return self._settings.modifier_tag

    def apply(self, changes: Changeset | Mapping[str, Any], target: Any) -> None:
        """Apply the fields named in ``changes`` onto ``target``.

        Args:
            changes: Changeset, or plain mapping of tag to raw value. Both
                are normalized in place: cleared entries of a mutable plain
                mapping are rewritten to None. Read-only mappings are left as is.
            target: Mutable dataclass or Pydantic model instance.

        Raises:
            UnknownFieldError: If any tag has no field on the target.
            ValueCoercionError: If any value cannot be converted.
            ChangesetConfigurationError: If the target cannot be patched.
        """
        ensure_logging()
        record_type = self._check_target(target)
        changeset = as_changeset(changes)
        cleared = sanitize_changes(changeset)
        if changeset is not changes and isinstance(changes, MutableMapping):
            for key in cleared:
                changes[key] = None

        try:
            schema = self._registry.resolve(record_type)
            planned = plan_changes(schema, changeset, self._registry, target=target)
        except ChangesetError as e:
            logger.debug(
                "changeset_rejected",
                record_type=record_type.__name__,
                error=type(e).__name__,
                tags=list(changeset),
            )
            raise

        write_changes(planned, target)
        logger.debug(
            "changeset_applied",
            record_type=record_type.__name__,
            tags=list(changeset),
            cleared=cleared,
        )

    def apply_with_modifier(
        self,
        changes: Changeset | MutableMapping[str, Any],
        modifier: str,
        target: Any,
    ) -> None:
        """Stamp the modifier identity onto ``changes``, then apply them.

        The caller's mapping gains (or overwrites) the modifier entry; pass a
        copy to keep the original. No modification timestamp is written.

        Args:
            changes: Changeset or mutable mapping, mutated in place.
            modifier: Identity of whoever made the change.
            target: Mutable dataclass or Pydantic model instance.

        Raises:
            Whatever apply() raises, unchanged.
        """
        changes[self.modifier_tag] = modifier
        self.apply(changes, target)

    def _check_target(self, target: Any) -> type:
        if isinstance(target, type):
            raise ChangesetConfigurationError(
                f"Expected a record instance, got the class {target.__name__}"
            )
        record_type = type(target)
        if not is_record_type(record_type):
            raise ChangesetConfigurationError(
                f"{record_type.__name__} is not a dataclass or Pydantic model instance"
            )
        return record_type


_default_applier: ChangeApplier | None = None


def get_applier() -> ChangeApplier:
    """Access the process-wide applier, creating it on first use."""
    global _default_applier
    if _default_applier is None:
        _default_applier = ChangeApplier()
    return _default_applier


def apply_changes(changes: Changeset | Mapping[str, Any], target: Any) -> None:
    """Apply a changeset to a record using the default applier.

    Empty strings and unset sequences in a mutable ``changes`` are rewritten
    to None in place. See ChangeApplier.apply.
    """
    get_applier().apply(changes, target)


def apply_changes_with_modifier(
    changes: Changeset | MutableMapping[str, Any],
    modifier: str,
    target: Any,
) -> None:
    """Stamp ``modifiedBy`` onto the changeset and apply it to a record.

    See ChangeApplier.apply_with_modifier.
    """
    get_applier().apply_with_modifier(changes, modifier, target)
