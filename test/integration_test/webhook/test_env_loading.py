"""Integration tests for .env file loading in the server entry point."""

import os
import tempfile
from unittest.mock import MagicMock, patch

import pytest

from slack_cheer import settings as settings_module


@pytest.fixture(autouse=True)
def restore_test_environment():
    """Drop the cached test environment so later tests read it afresh."""
    yield
    settings_module._test_env = None


def test_dotenv_values_reach_settings():
    """Test that variables from --env-file are loaded before settings are built."""
    with tempfile.NamedTemporaryFile(mode="w+", delete=False, suffix=".env") as temp_env:
        temp_env.write("SLACK_CLIENT_ID=123.456\n")
        temp_env.write("UNSPLASH_APP_ID=unsplash-key\n")
        temp_env.write("BROADCAST_HOUR=9\n")
        temp_env.write("PORT=3300\n")
        temp_env_path = temp_env.name

    try:
        with (
            patch("slack_cheer.webhook.entry.setup_logging_from_args"),
            patch("slack_cheer.webhook.entry.asyncio.run") as mock_run,
            patch("slack_cheer.webhook.entry.run_slack_server", new_callable=MagicMock) as mock_server_run,
            patch.dict("os.environ", {"CHEER_NO_ENV_FILE": "true"}, clear=True),
        ):
            settings_module._test_env = None
            from slack_cheer.webhook.entry import main

            main(["--env-file", temp_env_path])

            settings = settings_module.get_settings()
            assert settings.slack_client_id == "123.456"
            assert settings.unsplash_access_key.get_secret_value() == "unsplash-key"
            assert settings.broadcast_hour == 9

            mock_run.assert_called_once()
            mock_server_run.assert_called_once_with(host="0.0.0.0", port=3300, settings=settings)
    finally:
        os.unlink(temp_env_path)


def test_no_env_file_skips_loading():
    """Test that --no-env-file leaves the environment untouched."""
    with tempfile.NamedTemporaryFile(mode="w+", delete=False, suffix=".env") as temp_env:
        temp_env.write("SLACK_CLIENT_ID=from-file\n")
        temp_env_path = temp_env.name

    try:
        with (
            patch("slack_cheer.webhook.entry.setup_logging_from_args"),
            patch("slack_cheer.webhook.entry.asyncio.run"),
            patch("slack_cheer.webhook.entry.run_slack_server", new_callable=MagicMock),
            patch.dict("os.environ", {"CHEER_NO_ENV_FILE": "true"}, clear=True),
        ):
            settings_module._test_env = None
            from slack_cheer.webhook.entry import main

            main(["--env-file", temp_env_path, "--no-env-file"])

            assert "SLACK_CLIENT_ID" not in os.environ
            assert settings_module.get_settings().slack_client_id is None
    finally:
        os.unlink(temp_env_path)
