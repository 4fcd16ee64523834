"""
Protocol definition for integration store backends.

A store keeps one :class:`~slack_cheer.models.IntegrationRecord` per installed
team plus a handful of string configuration entries (such as the Events API
verification token). The HTTP routes, the sad-message handler and the daily
broadcast all share the same store instance.
"""

from typing import List, Optional, Protocol, runtime_checkable

from slack_cheer.models import IntegrationRecord


@runtime_checkable
class IntegrationStore(Protocol):
    """Protocol for integration store backends.

    Every method is a coroutine; implementations only promise per-call
    consistency.
    """

    async def get(self, team_id: str) -> Optional[IntegrationRecord]:
        """Return the record of *team_id*, or ``None`` if it is not installed."""
        ...

    async def set(self, team_id: str, record: IntegrationRecord) -> None:
        """Create or replace the record of *team_id*."""
        ...

    async def delete(self, team_id: str) -> None:
        """Remove the record of *team_id*; missing records are ignored."""
        ...

    async def list(self) -> List[IntegrationRecord]:
        """Return every stored record, in no particular order."""
        ...

    async def get_config(self, key: str) -> Optional[str]:
        """Return a configuration value, or ``None`` when unset."""
        ...

    async def set_config(self, key: str, value: str) -> None:
        """Store a configuration value."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...

    @classmethod
    def from_settings(cls, settings) -> "IntegrationStore":
        """Create a store from the application settings."""
        ...
