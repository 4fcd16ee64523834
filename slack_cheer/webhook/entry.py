"""Cheer bot server entry point.

Starts the FastAPI app with uvicorn: the Slack Events API endpoint, the
OAuth install flow and the daily broadcast scheduler all run in this single
process and share one event loop.

Quick Start Examples
====================

**1. Run the server:**

    .. code-block:: bash

        python -m slack_cheer.webhook --host 0.0.0.0 --port 3000

**2. Load a custom .env file and log verbosely:**

    .. code-block:: bash

        python -m slack_cheer.webhook --env-file /etc/slack-cheer/.env --log-level DEBUG

**3. From Python:**

    .. code-block:: python

        import asyncio
        from slack_cheer.webhook.entry import run_slack_server

        asyncio.run(run_slack_server(host="127.0.0.1", port=3000))

Environment Variables
=====================
- **SLACK_CLIENT_ID** / **SLACK_CLIENT_SECRET**: Slack app credentials for the install flow
- **SLACK_SIGNING_SECRET**: optional request signature verification
- **UNSPLASH_ACCESS_KEY** (or **UNSPLASH_APP_ID**): Unsplash API access key
- **BASE_URL**: public URL of this service
- **STORE_BACKEND**: ``memory`` (default) or ``redis``; **REDIS_URL** for the latter
- **PORT**: port to listen on when ``--port`` is not given
- **LOG_LEVEL**, **LOG_FILE**, **LOG_DIR**, **LOG_FORMAT**: logging defaults for options not given on the command line
"""

from __future__ import annotations

import asyncio
import logging
import pathlib
import sys
from typing import Final, Optional

import uvicorn
from dotenv import load_dotenv
from pydantic import ValidationError

from slack_cheer.logging.config import setup_logging_from_args
from slack_cheer.service import CheerService
from slack_cheer.settings import SettingModel, get_settings

from .cli.options import _parse_args
from .server import create_slack_app

__all__: list[str] = ["run_slack_server", "main"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


async def run_slack_server(
    host: str = "0.0.0.0",
    port: int = 3000,
    settings: Optional[SettingModel] = None,
) -> None:
    """Run the cheer bot server until it is interrupted.

    Parameters
    ----------
    host : str, optional
        The host interface to listen on. Default is "0.0.0.0" (all interfaces).
    port : int, optional
        The port number to listen on. Default is 3000.
    settings : Optional[SettingModel], optional
        Settings to build the service from, the global settings by default.
    """
    _LOG.info(f"Starting Slack cheer bot on {host}:{port}")

    service = CheerService.from_settings(settings)
    app = create_slack_app(service)

    config = uvicorn.Config(app=app, host=host, port=port, log_config=None)
    server = uvicorn.Server(config=config)
    await server.serve()


def main(argv: Optional[list[str]] = None) -> None:
    """Run the cheer bot server as a standalone application.

    This handles:
    1. Parsing command-line arguments
    2. Setting up logging from the command line
    3. Loading environment variables from .env file
    4. Loading and validating settings
    5. Reconfiguring logging with the LOG_* settings as fallbacks
    6. Starting the server

    Parameters
    ----------
    argv : Optional[list[str]], optional
        Command-line arguments to parse. If None, uses sys.argv.
    """
    args = _parse_args(argv)

    # Use centralized logging configuration
    setup_logging_from_args(args)

    # Load environment variables from .env file if not disabled
    if not args.no_env_file:
        env_path = pathlib.Path(args.env_file)
        if env_path.exists():
            _LOG.info(f"Loading environment variables from {env_path.resolve()}")
            load_dotenv(dotenv_path=env_path, override=True)
        else:
            _LOG.warning(f"Environment file not found: {env_path.resolve()}")

    overrides = {"broadcast_enabled": False} if args.no_broadcast else {}
    try:
        settings = get_settings(
            env_file=args.env_file, no_env_file=args.no_env_file, force_reload=True, **overrides
        )
    except ValidationError as e:
        _LOG.error(f"Configuration error: {e}")
        sys.exit(1)

    # Options not given on the command line come from LOG_* settings
    setup_logging_from_args(args, settings)

    try:
        asyncio.run(run_slack_server(host=args.host, port=args.port or settings.port, settings=settings))
    except ValueError as e:
        _LOG.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
