"""Shared pytest fixtures for ExprWhizz tests."""

from __future__ import annotations

import pytest

from exprwhizz.core.session import Session
from exprwhizz.core.variable_store import VariableStore


@pytest.fixture
def variables() -> VariableStore:
    """Return an empty variable store with default capacity."""
    return VariableStore()


@pytest.fixture
def seeded_variables() -> VariableStore:
    """Return a store holding x = 0.8 and y = 0.2."""
    store = VariableStore()
    store.store("x", 0.8)
    store.store("y", 0.2)
    return store


@pytest.fixture
def session() -> Session:
    """Return a session with default configuration."""
    return Session()
