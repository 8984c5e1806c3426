"""Pytest configuration and shared fixtures."""

import logfire
import pytest

from homeboard.core.config import Settings


@pytest.fixture(autouse=True, scope="session")
def configure_test_logfire() -> None:
    """Configure Logfire once so spans neither export nor warn about missing setup."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file, with Logfire export disabled."""
    return Settings(
        database_path=str(tmp_path / "homeboard-test.db"),
        logfire_token=None,
        environment="test",
    )
