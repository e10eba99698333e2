"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from kvmapper import EntityMapper, EntityRegistry, LocalStore


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return LocalStore()


@pytest.fixture
def mapper(store):
    """Mapper over a fresh in-memory store and the global registry."""
    return EntityMapper(store)


@pytest.fixture
def registry():
    """Isolated EntityRegistry, so tests don't touch the global one."""
    return EntityRegistry()
