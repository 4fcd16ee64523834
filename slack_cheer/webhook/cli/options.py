"""Command-line argument parsing for the cheer bot server.

Returns a validated :class:`WebhookServerCliOptions` instance capturing the
configuration needed to start the server.

Examples
--------
.. code-block:: python

    from slack_cheer.webhook.cli.options import _parse_args

    opts = _parse_args(["--host", "127.0.0.1", "--port", "8080"])
    print(opts.host, opts.port)
"""

from __future__ import annotations

import argparse

from slack_cheer.logging.config import add_logging_arguments

from .models import WebhookServerCliOptions


def _parse_args(argv: list[str] | None = None) -> WebhookServerCliOptions:
    """Parse CLI args and build `WebhookServerCliOptions`.

    Parameters
    ----------
    argv : list[str] | None, optional
        Argument list to parse. If None, uses sys.argv.

    Returns
    -------
    WebhookServerCliOptions
        Validated immutable options for starting the server.
    """
    parser = argparse.ArgumentParser(description="Run the Slack cheer bot server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: PORT setting, 3000)",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env in current directory)",
    )
    parser.add_argument(
        "--no-env-file",
        action="store_true",
        help="Disable loading from .env file",
    )
    parser.add_argument(
        "--no-broadcast",
        action="store_true",
        help="Do not schedule the daily photo broadcast in this process",
    )

    # Add centralized logging arguments
    parser = add_logging_arguments(parser)

    return WebhookServerCliOptions.deserialize(parser.parse_args(argv))
