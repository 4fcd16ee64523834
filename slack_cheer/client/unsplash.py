"""Unsplash image provider.

Fetches one random photo for a fixed query (``animals``, square-ish, resized
to 400x500 by default) from the Unsplash API.

Examples
--------
.. code-block:: python

    import asyncio
    from slack_cheer.client.unsplash import UnsplashClient

    async def main():
        client = UnsplashClient(access_key="...")
        photo = await client.fetch_random()
        print(photo.image_url, photo.author_name)
        await client.aclose()

    asyncio.run(main())
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Optional

import httpx

from slack_cheer.models import Photo

__all__: list[str] = ["ImageProviderError", "ImageQuery", "UnsplashClient", "UNSPLASH_API_URL"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

UNSPLASH_API_URL: Final[str] = "https://api.unsplash.com"


class ImageProviderError(RuntimeError):
    """Raised when the provider answers with something that is not a photo."""


class ImageQuery:
    """Search parameters sent with every random-photo request."""

    __slots__ = ("query", "orientation", "width", "height")

    def __init__(self, query: str = "animals", orientation: str = "squarish", width: int = 400, height: int = 500):
        self.query = query
        self.orientation = orientation
        self.width = width
        self.height = height

    def as_params(self) -> Dict[str, Any]:
        return {"query": self.query, "orientation": self.orientation, "w": self.width, "h": self.height}


class UnsplashClient:
    """Async client for ``GET /photos/random``.

    Parameters
    ----------
    access_key : str
        The Unsplash application access key (``Client-ID``)
    query : Optional[ImageQuery]
        Search parameters, by default animals / squarish / 400x500
    http_client : Optional[httpx.AsyncClient]
        Client to reuse; one is created (and owned) when omitted
    timeout : float
        Request timeout in seconds for the owned client
    """

    def __init__(
        self,
        access_key: str,
        query: Optional[ImageQuery] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._query = query or ImageQuery()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "Accept-Version": "v1",
            "Authorization": f"Client-ID {access_key}",
        }

    @property
    def query(self) -> ImageQuery:
        return self._query

    async def fetch_random(self) -> Photo:
        """Fetch one random photo matching the configured query.

        Returns
        -------
        Photo
            The resized image URL, the photo page and the author's name

        Raises
        ------
        httpx.HTTPError
            On transport errors or non-2xx responses
        ImageProviderError
            If the response body does not describe a photo
        """
        response = await self._client.get(
            f"{UNSPLASH_API_URL}/photos/random", params=self._query.as_params(), headers=self._headers
        )
        response.raise_for_status()
        data = response.json()
        try:
            photo = Photo(
                image_url=data["urls"]["custom"],
                reference_url=data["links"]["html"],
                author_name=data["user"]["name"],
            )
        except (KeyError, TypeError) as e:
            raise ImageProviderError(f"Unexpected Unsplash response, missing {e}") from e
        _LOG.debug(f"Fetched photo by {photo.author_name}: {photo.reference_url}")
        return photo

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
