# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Isolates every loader test from the real environment and working dir
# - Builds a frozen AppConfig backed by a throwaway SQLite file
# - Provides a TestClient that runs the application lifespan
# =============================================================================

import logging
import os

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from core.config import AppConfig
from core.logging import reset_logging

SECRET_VARS = ("DATABASE_URL", "JWT_SECRET", "REDIS_URL")


# =============================================================================
# Environment
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Run in an empty directory with no configuration variables set.

    Every secret variable is registered with monkeypatch, so values a test
    (or load_dotenv) sets are removed again on teardown.
    """
    for key in list(os.environ):
        if key.upper().startswith("APP_"):
            monkeypatch.delenv(key)

    for key in SECRET_VARS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def required_env(clean_env, monkeypatch):
    """The two variables every successful load needs."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{clean_env / 'env.db'}")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    return clean_env


@pytest.fixture
def reset_log_handlers():
    """Drop handlers installed by configure_logging after the test."""
    root = logging.getLogger()
    level = root.level
    yield
    reset_logging()
    root.setLevel(level)


# =============================================================================
# Application
# =============================================================================

@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Validated, frozen config using a SQLite file in tmp_path."""
    config = AppConfig()
    config.database.url = f"sqlite:///{tmp_path / 'test.db'}"
    config.secrets.jwt_secret = "test-secret"
    config.logging.dir = str(tmp_path / "logs")
    config.validate()
    config.freeze()
    return config


@pytest.fixture
def app(app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    """TestClient with startup and shutdown hooks running."""
    with TestClient(app) as test_client:
        yield test_client
