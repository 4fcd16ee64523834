"""In-process task queue implementations."""

from .sequential import SequentialTaskQueue

__all__ = ["SequentialTaskQueue"]
