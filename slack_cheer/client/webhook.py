"""Post messages to Slack incoming webhooks.

Each installed team gets an incoming webhook URL during the OAuth flow. This
module posts JSON payloads to those URLs with slack_sdk's
:class:`~slack_sdk.webhook.async_client.AsyncWebhookClient`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Final, Optional

from aiohttp import ClientError, ClientSession
from slack_sdk.webhook.async_client import AsyncWebhookClient

__all__: list[str] = ["WebhookPoster"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class WebhookPoster:
    """Fire-and-forget poster for incoming webhook URLs.

    Failures are logged and reported through the return value; nothing is
    raised and nothing is retried.

    Parameters
    ----------
    timeout : int
        Request timeout in seconds
    session : Optional[aiohttp.ClientSession]
        Session shared by every request; slack_sdk opens one per request when omitted
    """

    def __init__(self, timeout: int = 10, session: Optional[ClientSession] = None) -> None:
        self._timeout = timeout
        self._session = session

    def _client_for(self, url: str) -> AsyncWebhookClient:
        return AsyncWebhookClient(url=url, timeout=self._timeout, session=self._session)

    async def post(self, url: str, payload: Dict[str, Any]) -> bool:
        """Post *payload* to *url*.

        Parameters
        ----------
        url : str
            The incoming webhook URL
        payload : Dict[str, Any]
            The message body (``text``, ``attachments``, ``blocks``...)

        Returns
        -------
        bool
            ``True`` if Slack answered with HTTP 200
        """
        try:
            response = await self._client_for(url).send_dict(payload)
        except (ClientError, asyncio.TimeoutError) as e:
            _LOG.warning(f"Posting to incoming webhook failed: {e!r}")
            return False

        if response.status_code != 200:
            _LOG.warning(f"Incoming webhook answered {response.status_code}: {response.body}")
            return False
        return True
