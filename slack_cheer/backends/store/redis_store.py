"""
Redis implementation of the IntegrationStore protocol.

Records are kept as JSON strings in one hash (field = team id) and
configuration entries in a second hash, both under a configurable key prefix:

- ``<prefix>:integrations``
- ``<prefix>:config``
"""

from __future__ import annotations

import logging
from typing import Final, List, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.models import IntegrationRecord

__all__: list[str] = ["RedisStore", "StoreError"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a stored record cannot be decoded."""


class RedisStore(IntegrationStore):
    """IntegrationStore backed by Redis hashes.

    Parameters
    ----------
    client : redis.asyncio.Redis
        A client created with ``decode_responses=True``
    key_prefix : str, optional
        Prefix for the two hash keys, by default ``"slack_cheer"``
    """

    def __init__(self, client: aioredis.Redis, key_prefix: str = "slack_cheer") -> None:
        self._client = client
        self._integrations_key = f"{key_prefix}:integrations"
        self._config_key = f"{key_prefix}:config"

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "slack_cheer") -> "RedisStore":
        client = aioredis.from_url(url, decode_responses=True)
        return cls(client, key_prefix=key_prefix)

    @classmethod
    def from_settings(cls, settings) -> "RedisStore":
        """Create a store from ``REDIS_URL`` and ``REDIS_KEY_PREFIX``.

        Raises
        ------
        ValueError
            If ``REDIS_URL`` is not configured
        """
        if not settings.redis_url:
            raise ValueError("REDIS_URL must be set when STORE_BACKEND=redis")
        _LOG.info(f"Connecting integration store to Redis with key prefix '{settings.redis_key_prefix}'")
        return cls.from_url(settings.redis_url, key_prefix=settings.redis_key_prefix)

    async def get(self, team_id: str) -> Optional[IntegrationRecord]:
        raw = await self._client.hget(self._integrations_key, team_id)
        if raw is None:
            return None
        return self._decode(team_id, raw)

    async def set(self, team_id: str, record: IntegrationRecord) -> None:
        await self._client.hset(self._integrations_key, team_id, record.model_dump_json())

    async def delete(self, team_id: str) -> None:
        await self._client.hdel(self._integrations_key, team_id)

    async def list(self) -> List[IntegrationRecord]:
        entries = await self._client.hgetall(self._integrations_key)
        records: List[IntegrationRecord] = []
        for team_id, raw in entries.items():
            try:
                records.append(self._decode(team_id, raw))
            except StoreError as e:
                # One corrupt entry must not hide every other installation.
                _LOG.warning(f"Skipping unreadable integration record: {e}")
        return records

    async def get_config(self, key: str) -> Optional[str]:
        return await self._client.hget(self._config_key, key)

    async def set_config(self, key: str, value: str) -> None:
        await self._client.hset(self._config_key, key, value)

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _decode(team_id: str, raw: str) -> IntegrationRecord:
        try:
            return IntegrationRecord.model_validate_json(raw)
        except ValidationError as e:
            raise StoreError(f"Integration record for team {team_id} is not valid: {e}") from e
