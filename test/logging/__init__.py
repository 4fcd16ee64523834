"""Test logging configuration package."""

from .config import get_test_logger, setup_test_logging

__all__ = ["setup_test_logging", "get_test_logger"]
