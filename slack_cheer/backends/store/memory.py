"""
In-memory implementation of the IntegrationStore protocol.

This implementation is intended for development and testing only.
It keeps records in plain dictionaries, which means:
1. Installations are lost when the process restarts
2. Records are only visible inside the same process
"""

import warnings
from typing import Dict, List, Optional

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.models import IntegrationRecord


class MemoryStore(IntegrationStore):
    """In-memory implementation of IntegrationStore.

    Unlike a shared broker, every instance owns its own dictionaries so that
    tests and separately composed services never see each other's data.
    """

    def __init__(self) -> None:
        self._records: Dict[str, IntegrationRecord] = {}
        self._config: Dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings=None) -> "MemoryStore":
        """Create a new MemoryStore instance.

        The memory store needs no settings. This method also emits a warning
        about using this backend for development only.

        Returns:
            A new MemoryStore instance
        """
        warnings.warn(
            "⚠️  Memory store is for development/testing only. "
            "Installations will be lost on restart and are only visible inside this process.",
            UserWarning,
        )
        return cls()

    async def get(self, team_id: str) -> Optional[IntegrationRecord]:
        return self._records.get(team_id)

    async def set(self, team_id: str, record: IntegrationRecord) -> None:
        self._records[team_id] = record

    async def delete(self, team_id: str) -> None:
        self._records.pop(team_id, None)

    async def list(self) -> List[IntegrationRecord]:
        return list(self._records.values())

    async def get_config(self, key: str) -> Optional[str]:
        return self._config.get(key)

    async def set_config(self, key: str, value: str) -> None:
        self._config[key] = value

    async def close(self) -> None:
        """Nothing to release for the memory store."""
