"""Centralized logging configuration.

Every command-line entry point calls :func:`add_logging_arguments` on its
parser and :func:`setup_logging_from_args` once the arguments are parsed, so
all processes share the same format and handler layout.

Examples
--------
.. code-block:: python

    import argparse
    from slack_cheer.logging.config import add_logging_arguments, setup_logging_from_args

    parser = add_logging_arguments(argparse.ArgumentParser())
    setup_logging_from_args(parser.parse_args(["--log-level", "DEBUG"]))
"""

from __future__ import annotations

import argparse
import logging
import logging.config
import pathlib
from enum import Enum
from typing import Any, Dict, Final, Optional

__all__: list[str] = [
    "DEFAULT_LOG_FORMAT",
    "LOG_LEVELS",
    "add_logging_arguments",
    "build_logging_config",
    "setup_logging",
    "setup_logging_from_args",
]

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def add_logging_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add the shared logging options to *parser*.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        The parser to extend

    Returns
    -------
    argparse.ArgumentParser
        The same parser, for chaining
    """
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Python logging level (default: LOG_LEVEL setting, INFO)",
    )
    group.add_argument(
        "--log-file",
        default=None,
        help="Write logs to this file in addition to the console",
    )
    group.add_argument(
        "--log-dir",
        default=None,
        help="Directory for --log-file when it is a relative path (default: LOG_DIR setting, logs)",
    )
    group.add_argument(
        "--log-format",
        default=None,
        help="Log record format string",
    )
    return parser


def build_logging_config(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    log_format: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a :func:`logging.config.dictConfig` dictionary.

    Parameters
    ----------
    level : str
        Level for the root and ``slack_cheer`` loggers
    log_file : Optional[str]
        Optional file to log to; relative paths are placed in *log_dir*
    log_dir : Optional[str]
        Directory for relative *log_file* paths, by default ``logs``
    log_format : Optional[str]
        Record format, by default :data:`DEFAULT_LOG_FORMAT`

    Returns
    -------
    Dict[str, Any]
        The configuration dictionary
    """
    level = level.upper()
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
            "level": level,
        }
    }

    if log_file:
        path = pathlib.Path(log_file)
        if not path.is_absolute():
            path = pathlib.Path(log_dir or "logs") / path
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": str(path),
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
            "level": level,
        }

    handler_names = list(handlers)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": log_format or DEFAULT_LOG_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "": {"handlers": handler_names, "level": level},
            "slack_cheer": {"handlers": handler_names, "level": level, "propagate": False},
            # Reduce noise from external libraries
            "apscheduler": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
    }


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Configure logging for the whole process."""
    logging.config.dictConfig(build_logging_config(level, log_file, log_dir, log_format))


def setup_logging_from_args(args: Any, settings: Any = None) -> None:
    """Configure logging from parsed CLI options.

    Accepts an :class:`argparse.Namespace` or any object exposing
    ``log_level``, ``log_file``, ``log_dir`` and ``log_format`` attributes.
    An option left unset on the command line falls back to the same field of
    *settings* (a :class:`~slack_cheer.settings.SettingModel`) when given.
    """

    def _pick(name: str) -> Optional[str]:
        value = getattr(args, name, None)
        if value is None and settings is not None:
            value = getattr(settings, name, None)
        if isinstance(value, Enum):
            value = value.value
        return value

    setup_logging(
        level=_pick("log_level") or "INFO",
        log_file=_pick("log_file"),
        log_dir=_pick("log_dir"),
        log_format=_pick("log_format"),
    )
