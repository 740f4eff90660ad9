"""Pytest fixtures for the dashboard client layer and demo backend."""

from datetime import datetime, timezone

import httpx
import pytest

from finbins.api.main import create_app
from finbins.auth.credentials import make_synthetic_token
from finbins.database.local_storage import LocalStorage
from finbins.integrations.clients.mocks.demo_store import DemoDataStore
from finbins.integrations.clients.real_http.api_client import RealApiClient
from finbins.integrations.contracts.interfaces import UserProfile
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.utils.config_loader import ClientConfig

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
BACKEND_URL = "http://testserver/api"


@pytest.fixture
def store():
    """Freshly seeded, isolated demo store."""
    return DemoDataStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def demo_storage(storage):
    """Storage holding a synthetic session for demo user 1."""
    storage.save_session(make_synthetic_token(1, now_ms=1700000000000), UserProfile(id=1, name="Demo User", email="demo@example.com"))
    return storage


@pytest.fixture
def demo_dispatcher(demo_storage, store):
    return RequestDispatcher(demo_storage, config=ClientConfig(), demo_store=store)


@pytest.fixture
def backend_app():
    """Demo FastAPI backend with its own isolated store."""
    return create_app(store=DemoDataStore(clock=lambda: FIXED_NOW))


@pytest.fixture
def backend_client(backend_app):
    return RealApiClient(BACKEND_URL, transport=httpx.ASGITransport(app=backend_app))


@pytest.fixture
def real_dispatcher(storage, backend_client):
    """Dispatcher whose real path talks to the in-process demo backend."""
    return RequestDispatcher(storage, config=ClientConfig(), real_client=backend_client)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport():
    def _factory(handler):
        return RecordingTransport(handler)

    return _factory
