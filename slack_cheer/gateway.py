"""Delivery gateway: fetch a photo and post it to incoming webhooks.

Every call here is best-effort. Provider and transport failures are logged and
reported as ``None``/``False`` so that callers (queued message handling, the
daily broadcast, the install flow) carry on regardless.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Optional, Protocol

import httpx

from slack_cheer.client.unsplash import ImageProviderError
from slack_cheer.messages import build_cheer_payload, build_comfort_payload
from slack_cheer.models import Photo

__all__: list[str] = ["DeliveryGateway", "ImageProvider", "MessagePoster"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class ImageProvider(Protocol):
    async def fetch_random(self) -> Photo: ...

    async def aclose(self) -> None: ...


class MessagePoster(Protocol):
    async def post(self, url: str, payload: Dict[str, Any]) -> bool: ...


class DeliveryGateway:
    """Combines an image provider and a webhook poster.

    Parameters
    ----------
    images : ImageProvider
        Source of random photos
    poster : MessagePoster
        Posts payloads to incoming webhook URLs
    """

    def __init__(self, images: ImageProvider, poster: MessagePoster) -> None:
        self._images = images
        self._poster = poster

    async def fetch_photo(self) -> Optional[Photo]:
        """Fetch a photo, or ``None`` if the provider is unavailable."""
        try:
            return await self._images.fetch_random()
        except (httpx.HTTPError, ImageProviderError, ValueError) as e:
            _LOG.warning(f"Could not fetch a photo: {e!r}")
            return None

    async def aclose(self) -> None:
        await self._images.aclose()

    async def send_cheer(self, url: str, photo: Optional[Photo] = None) -> bool:
        """Post the cheerful photo message to *url*.

        Parameters
        ----------
        url : str
            Incoming webhook URL
        photo : Optional[Photo]
            Photo to send; a new one is fetched when omitted

        Returns
        -------
        bool
            Whether the message was delivered
        """
        photo = photo or await self.fetch_photo()
        if photo is None:
            return False
        return await self._poster.post(url, build_cheer_payload(photo))

    async def send_comfort(self, url: str, user_id: Optional[str]) -> bool:
        """Answer a sad message from *user_id* with a fresh photo."""
        photo = await self.fetch_photo()
        if photo is None:
            return False
        delivered = await self._poster.post(url, build_comfort_payload(photo, user_id))
        if delivered:
            _LOG.info(f"Sent a comforting photo to user {user_id}")
        return delivered
