"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from changeapply import AuditFields, ChangeApplier, SchemaRegistry
from tests.records import Celsius, Observation, Station


@pytest.fixture
def registry():
    """Fresh SchemaRegistry instance."""
    return SchemaRegistry()


@pytest.fixture
def applier(registry):
    """ChangeApplier backed by a fresh registry."""
    return ChangeApplier(registry=registry)


@pytest.fixture
def observation():
    return Observation(
        audit=AuditFields(created_by="Dylan"),
        city="Clearwater",
        temperature=Celsius(31.0),
        humidity=0.8,
        readings=3,
        tags=["coastal"],
        station=Station(name="KPIE", elevation=3),
    )
