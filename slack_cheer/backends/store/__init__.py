"""Integration store backends."""

from .memory import MemoryStore
from .redis_store import RedisStore, StoreError

__all__ = ["MemoryStore", "RedisStore", "StoreError"]
