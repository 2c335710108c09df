# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
ensures dependency_overrides are cleared after every test so persona
configuration from one test never leaks into the next.

All personas in one test share a single in-memory store, so a checklist
created by HR is the one the employee later completes.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.main import app as real_app
from src.middleware.auth import get_current_user
from src.routes._checklist_common import get_checklist_store, get_public_store
from src.schemas.auth import UserContext

from ..factories import FakeChecklistStore


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    return real_app


@pytest.fixture
def backing_store():
    """Unscoped store shared by every persona in the test."""
    return FakeChecklistStore()


def configure_app_for_persona(app, user: UserContext | None, store: FakeChecklistStore) -> None:
    """Point auth and store dependencies at the given persona and store."""
    if user is not None:

        async def fake_user():
            return user

        async def fake_store():
            return store.with_scope(user.data_scope)

        app.dependency_overrides[get_current_user] = fake_user
        app.dependency_overrides[get_checklist_store] = fake_store

    async def fake_public_store():
        return store.with_scope(None)

    app.dependency_overrides[get_public_store] = fake_public_store


@pytest.fixture
def make_client(app, backing_store):
    """Factory fixture: configure persona, return TestClient.

    Passing ``None`` builds an anonymous client for the public link routes.
    """

    def _make(user: UserContext | None) -> TestClient:
        configure_app_for_persona(app, user, backing_store)
        return TestClient(app)

    return _make


@pytest.fixture
def mock_storage():
    """Patch the S3 storage singleton used by the item routes."""
    storage = MagicMock()
    storage.build_object_key.side_effect = lambda employee_id, item_id, filename: (
        f"{employee_id}/{item_id}/{filename}"
    )
    storage.upload_file = AsyncMock(side_effect=lambda data, key, content_type: key)
    storage.delete_file = AsyncMock()
    storage.get_download_url = AsyncMock(return_value="https://minio.local/signed")
    with patch("src.routes.checklist_items.get_storage_service", return_value=storage):
        yield storage
