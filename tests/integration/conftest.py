"""Pytest configuration and fixtures for HTTP integration tests."""

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from homeboard.main import create_app


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """TestClient running the app lifespan against a temporary database file."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[[str], dict[str, str]]:
    """Register a user and return the headers that authenticate as them."""

    def _register(name: str) -> dict[str, str]:
        response = client.post("/users", json={"email": f"{name.lower()}@example.com", "name": name})
        assert response.status_code == 201, response.text
        return {"X-User-Id": response.json()["id"]}

    return _register
