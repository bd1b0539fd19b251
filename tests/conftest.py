# tests/conftest.py
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.main import create_app

FIXED_NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def app():
    """
    Fresh application per test so dependency overrides never leak.
    """
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """
    TestClient bound to the per-test application.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def fixed_clock():
    """
    Clock returning FIXED_NOW, for deterministic "ongoing" end times.
    """
    return lambda: FIXED_NOW
