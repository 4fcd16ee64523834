"""
Integration store loader.

Selects and instantiates a store backend based on the ``STORE_BACKEND``
setting.
"""

from __future__ import annotations

import logging
from typing import Dict, Final, Optional, Type

from slack_cheer.settings import SettingModel, StoreBackend, get_settings

from .base.protocol import IntegrationStore
from .store.memory import MemoryStore
from .store.redis_store import RedisStore

__all__: list[str] = ["BACKENDS", "load_store"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

BACKENDS: Final[Dict[StoreBackend, Type[IntegrationStore]]] = {
    StoreBackend.MEMORY: MemoryStore,
    StoreBackend.REDIS: RedisStore,
}


def load_store(settings: Optional[SettingModel] = None) -> IntegrationStore:
    """Instantiate the configured integration store.

    Parameters
    ----------
    settings : Optional[SettingModel]
        Settings to read ``STORE_BACKEND`` from; the global settings by default

    Returns
    -------
    IntegrationStore
        A ready-to-use store instance

    Raises
    ------
    ValueError
        If the selected backend is missing required settings
    """
    settings = settings or get_settings()
    backend_cls = BACKENDS[settings.store_backend]
    _LOG.info(f"Loading integration store backend: {settings.store_backend.value}")
    return backend_cls.from_settings(settings)
