"""
Shared fixtures: every test builds its own app so the roll store and
the rate limiter never leak between tests.
"""

import pytest
from fastapi.testclient import TestClient

from rollserver.config import Settings
from rollserver.main import create_app

ADMIN_TOKEN = "abc"


@pytest.fixture
def make_client():
    def _make(**overrides) -> TestClient:
        values = {"STATIC_DIR": ""}
        values.update(overrides)
        return TestClient(create_app(Settings(**values)))

    return _make


@pytest.fixture
def test_client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def storing_client(make_client) -> TestClient:
    return make_client(STORE_ROLLS=True, ADMIN_TOKEN=ADMIN_TOKEN)
