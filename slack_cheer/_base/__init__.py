"""Base utilities for the cheer bot server factories.

This package exports the base server factory interface that the webhook web
app factory inherits.
"""

from .app import BaseServerFactory

__all__ = ["BaseServerFactory"]
