"""
Pytest fixtures for rut_engine tests.
"""

import pytest
import structlog

from rut_engine.settings import get_settings


@pytest.fixture(autouse=True, scope="session")
def quiet_structlog():
    """Send structlog output through stdlib logging so it stays out of stdout."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry_env(monkeypatch):
    """Point the registry settings at a fake URL."""
    monkeypatch.setenv("REGISTRY_BASE_URL", "https://registry.example.com/api/")
    monkeypatch.setenv("REGISTRY_API_KEY", "test-key")
    monkeypatch.setenv("REGISTRY_MAX_RETRIES", "0")
    return "https://registry.example.com/api"
