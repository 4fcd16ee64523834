"""Pydantic models for the cheer bot server CLI options.

Defines a typed configuration model used by the webhook server entrypoint.
Use this model to validate parsed arguments and to ensure consistent behavior
across environments.

Examples
--------
.. code-block:: python

    from slack_cheer.webhook.cli.options import _parse_args

    opts = _parse_args(["--port", "3001"])  # WebhookServerCliOptions
    assert opts.port == 3001
"""

from __future__ import annotations

import argparse

from pydantic import BaseModel, ConfigDict, Field


class WebhookServerCliOptions(BaseModel):
    """Validated CLI options for the cheer bot server entrypoint.

    Fields
    ------
    host : str
        Host to bind (default: 0.0.0.0)
    port : int | None
        Port to listen on (default: the PORT setting, 3000)
    log_level : str | None
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL); the LOG_LEVEL setting when None
    log_file : str | None
        Path to log file (optional)
    log_dir : str | None
        Directory for log files (optional)
    log_format : str | None
        Log message format (optional)
    env_file : str
        Path to .env file for environment variable loading
    no_env_file : bool
        Disable loading .env file when True
    no_broadcast : bool
        Do not schedule the daily broadcast in this process
    """

    host: str = "0.0.0.0"
    port: int | None = Field(None, ge=1, le=65535)
    log_level: str | None = None
    log_file: str | None = None
    log_dir: str | None = None
    log_format: str | None = None

    env_file: str = ".env"
    no_env_file: bool = False

    no_broadcast: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def deserialize(cls, ns: argparse.Namespace) -> "WebhookServerCliOptions":
        """Build a validated options object from argparse namespace."""
        data = {name: getattr(ns, name) for name in cls.model_fields.keys() if hasattr(ns, name)}
        return cls(**data)
