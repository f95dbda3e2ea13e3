"""
Pytest configuration for client tests.

Why: Force AnyIO to use the asyncio backend and wire the client against an
in-process fake backend (httpx.MockTransport) so no test touches the network.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the package and the test helpers are importable from a source checkout
REPO_ROOT = Path(__file__).resolve().parents[2]
TESTS_DIR = Path(__file__).resolve().parent
for p in (str(REPO_ROOT), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)

from lms_client.api_client import ApiClient  # noqa: E402
from lms_client.identity_access.session import SessionManager  # noqa: E402
from lms_client.identity_access.stores import InMemorySessionStore  # noqa: E402
from utils.fake_backend import FakeBackend  # noqa: E402


BASE_URL = "http://lms.test"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def api(backend: FakeBackend) -> ApiClient:
    return ApiClient(BASE_URL, transport=backend.transport())


@pytest.fixture
def sessions(api: ApiClient, store: InMemorySessionStore) -> SessionManager:
    return SessionManager(api, store)
