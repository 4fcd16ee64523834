"""
Queued Slack event handling.

This package provides the handler the sequential task queue drives for every
accepted message event.
"""

from .handler import EventHandler, SadMessageHandler

__all__ = ["EventHandler", "SadMessageHandler"]
