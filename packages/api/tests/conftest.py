# This project was developed with assistance from AI tools.
"""Shared fixtures for unit tests."""

import pytest

from src.services.activation import clear_activation_listeners, register_activation_listener

from .factories import FakeChecklistStore


@pytest.fixture
def store():
    """Unscoped in-memory checklist store."""
    return FakeChecklistStore()


@pytest.fixture
def activations():
    """Record activation events dispatched during the test."""
    received = []

    async def _listener(event):
        received.append(event)

    register_activation_listener(_listener)
    yield received
    clear_activation_listeners()
