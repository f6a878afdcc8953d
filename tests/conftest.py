"""
Shared fixtures for the test suite.

Application tests run against a throwaway SQLite file per test with cheap
bcrypt rounds and non-Secure cookies so the plain-HTTP test client keeps
them.
"""

import os

os.environ.setdefault("AUTH_DEMO_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_DEMO_COOKIE_SECURE", "false")
os.environ.setdefault("AUTH_DEMO_PASSWORD_BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_DEMO_LOG_LEVEL", "WARNING")

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from api.src.config import Settings, get_settings
from patterns.src.config import reset_config


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointing at a fresh SQLite file."""
    monkeypatch.setenv("AUTH_DEMO_DATABASE_URL", f"Data Source={tmp_path / 'auth_test.db'}")
    monkeypatch.setenv("AUTH_DEMO_COOKIE_SECURE", "false")
    monkeypatch.setenv("AUTH_DEMO_PASSWORD_BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def oauth_settings(settings, monkeypatch) -> Settings:
    """Settings with Google and Microsoft configured, Facebook left off."""
    monkeypatch.setenv("AUTH_DEMO_GOOGLE_CLIENT_ID", "google-client")
    monkeypatch.setenv("AUTH_DEMO_GOOGLE_CLIENT_SECRET", "google-secret")
    monkeypatch.setenv("AUTH_DEMO_MICROSOFT_CLIENT_ID", "microsoft-client")
    monkeypatch.setenv("AUTH_DEMO_MICROSOFT_CLIENT_SECRET", "microsoft-secret")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture(autouse=True)
def fresh_pattern_config() -> Iterator[None]:
    """Re-read pattern catalog settings for every test."""
    reset_config()
    yield
    reset_config()


# ============================================================================
# APPLICATION
# ============================================================================


@pytest.fixture
def client(settings) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    from api.src.main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
