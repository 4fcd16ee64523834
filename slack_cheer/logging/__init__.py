"""Logging helpers shared by the command-line entry points."""

from .config import add_logging_arguments, setup_logging, setup_logging_from_args

__all__ = ["add_logging_arguments", "setup_logging", "setup_logging_from_args"]
