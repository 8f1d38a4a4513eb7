"""Root pytest configuration for all tests.

This conftest applies to all test types (unit and integration).
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def _isolate_wp_environment(monkeypatch):
    """Keep real WordPress credentials in the developer's shell out of tests."""
    monkeypatch.delenv("WP_USERNAME", raising=False)
    monkeypatch.delenv("WP_APP_PASSWORD", raising=False)


@pytest.fixture(autouse=True)
def _reset_app_logger():
    """Drop handlers the CLI attaches so they don't leak between tests."""
    yield
    app_logger = logging.getLogger("wp_architect")
    app_logger.handlers.clear()
    app_logger.setLevel(logging.NOTSET)
