"""
Global pytest configuration.

Keeps every test isolated from the developer's ``.env`` file and from the
process-wide singletons (settings, web app).
"""

import os

import pytest

# Must be set before any settings object is created.
os.environ.setdefault("CHEER_NO_ENV_FILE", "true")

from slack_cheer import settings as settings_module  # noqa: E402
from slack_cheer.webhook.app import web_factory  # noqa: E402
from test.logging import setup_test_logging  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    """Route library logs through the test logging configuration."""
    setup_test_logging()
    yield


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop cached settings and the web app instance around every test."""
    settings_module._settings = None
    web_factory.reset()
    yield
    settings_module._settings = None
    web_factory.reset()


@pytest.fixture(scope="function")
def anyio_backend():
    """
    Configure anyio backend to use asyncio.

    This ensures consistent behavior across all async tests.
    """
    return "asyncio"
