"""Unit tests for :pymod:`slack_cheer.webhook.entry`."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from slack_cheer.settings import SettingModel
from slack_cheer.webhook import entry


@pytest.fixture
def patched_entry():
    """Patch everything main() would start for real."""
    with (
        patch("slack_cheer.webhook.entry.setup_logging_from_args") as setup_logging,
        patch("slack_cheer.webhook.entry.run_slack_server", new=MagicMock(return_value=None)) as run_server,
        patch("slack_cheer.webhook.entry.asyncio.run") as asyncio_run,
        patch("slack_cheer.webhook.entry.load_dotenv") as load_dotenv,
    ):
        yield {
            "setup_logging": setup_logging,
            "run_server": run_server,
            "asyncio_run": asyncio_run,
            "load_dotenv": load_dotenv,
        }


def test_main_uses_settings_port_by_default(patched_entry):
    entry.main(["--no-env-file"])

    assert patched_entry["setup_logging"].call_count == 2
    patched_entry["load_dotenv"].assert_not_called()
    patched_entry["asyncio_run"].assert_called_once()
    kwargs = patched_entry["run_server"].call_args.kwargs
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 3000
    assert isinstance(kwargs["settings"], SettingModel)


def test_main_cli_port_wins(patched_entry):
    entry.main(["--no-env-file", "--host", "127.0.0.1", "--port", "8080"])

    kwargs = patched_entry["run_server"].call_args.kwargs
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8080


def test_main_no_broadcast(patched_entry):
    entry.main(["--no-env-file", "--no-broadcast"])

    assert patched_entry["run_server"].call_args.kwargs["settings"].broadcast_enabled is False


def test_main_loads_existing_env_file(patched_entry, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text("BROADCAST_HOUR=8\n", encoding="utf-8")

    entry.main(["--env-file", str(env_file)])

    patched_entry["load_dotenv"].assert_called_once_with(dotenv_path=env_file, override=True)


def test_main_warns_on_missing_env_file(patched_entry, tmp_path: Path, caplog: pytest.LogCaptureFixture):
    entry.main(["--env-file", str(tmp_path / "missing.env")])

    patched_entry["load_dotenv"].assert_not_called()
    assert "Environment file not found" in caplog.text


def test_main_exits_on_invalid_settings(patched_entry, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BROADCAST_HOUR", "25")

    with pytest.raises(SystemExit) as exc_info:
        entry.main(["--no-env-file"])

    assert exc_info.value.code == 1
    patched_entry["asyncio_run"].assert_not_called()


def test_main_exits_on_unknown_timezone(patched_entry, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BROADCAST_TIMEZONE", "Nowhere/Land")

    with pytest.raises(SystemExit) as exc_info:
        entry.main(["--no-env-file"])

    assert exc_info.value.code == 1
    patched_entry["asyncio_run"].assert_not_called()


def test_main_exits_on_startup_configuration_error(patched_entry):
    patched_entry["asyncio_run"].side_effect = ValueError("REDIS_URL must be set when STORE_BACKEND=redis")

    with pytest.raises(SystemExit) as exc_info:
        entry.main(["--no-env-file"])

    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_run_slack_server_serves_app():
    settings = SettingModel(_env_file=None, broadcast_enabled=False)
    service = MagicMock()
    app = MagicMock()
    server = MagicMock()
    server.serve = AsyncMock()

    with (
        patch("slack_cheer.webhook.entry.CheerService.from_settings", return_value=service) as from_settings,
        patch("slack_cheer.webhook.entry.create_slack_app", return_value=app) as create_app,
        patch("slack_cheer.webhook.entry.uvicorn.Config") as config_cls,
        patch("slack_cheer.webhook.entry.uvicorn.Server", return_value=server),
    ):
        await entry.run_slack_server(host="127.0.0.1", port=3100, settings=settings)

    from_settings.assert_called_once_with(settings)
    create_app.assert_called_once_with(service)
    config_cls.assert_called_once_with(app=app, host="127.0.0.1", port=3100, log_config=None)
    server.serve.assert_awaited_once()


class TestLoggingSettings:
    @pytest.fixture
    def setup_logging(self):
        with (
            patch("slack_cheer.logging.config.setup_logging") as setup_logging,
            patch("slack_cheer.webhook.entry.run_slack_server", new=MagicMock(return_value=None)),
            patch("slack_cheer.webhook.entry.asyncio.run"),
        ):
            yield setup_logging

    def test_log_settings_from_environment(self, setup_logging, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "cheer.log")
        monkeypatch.setenv("LOG_DIR", "/var/log/cheer")

        entry.main(["--no-env-file"])

        assert setup_logging.call_count == 2
        assert setup_logging.call_args_list[0].kwargs["level"] == "INFO"
        assert setup_logging.call_args.kwargs == {
            "level": "DEBUG",
            "log_file": "cheer.log",
            "log_dir": "/var/log/cheer",
            "log_format": "%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
        }

    def test_cli_options_win_over_settings(self, setup_logging, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        entry.main(["--no-env-file", "--log-level", "warning", "--log-format", "%(message)s"])

        assert setup_logging.call_args.kwargs["level"] == "WARNING"
        assert setup_logging.call_args.kwargs["log_format"] == "%(message)s"
