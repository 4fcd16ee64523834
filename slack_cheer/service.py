"""Composition root of the cheer bot.

:class:`CheerService` owns every long-lived object of the process: the
integration store, the delivery gateway, the sequential message queue, the
ingestion boundary and the daily broadcast. It is created once at startup and
handed to the web app, whose lifespan starts and stops it.

Examples
--------
.. code-block:: python

    from slack_cheer.service import CheerService
    from slack_cheer.settings import get_settings

    service = CheerService.from_settings(get_settings())
    async with service.lifespan():
        ...
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Final, Optional

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.backends.loader import load_store
from slack_cheer.backends.queue.sequential import SequentialTaskQueue
from slack_cheer.broadcast import DailyBroadcast
from slack_cheer.client.oauth import SlackOAuth
from slack_cheer.client.unsplash import ImageQuery, UnsplashClient
from slack_cheer.client.webhook import WebhookPoster
from slack_cheer.gateway import DeliveryGateway
from slack_cheer.models import IntegrationRecord, QueuedMessage
from slack_cheer.settings import SettingModel, get_settings
from slack_cheer.webhook.event.handler import SadMessageHandler
from slack_cheer.webhook.ingestion import EventIngestor

__all__: list[str] = ["CheerService", "OAuthNotConfiguredError"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class OAuthNotConfiguredError(RuntimeError):
    """Raised when the install flow is used without Slack client credentials."""


class CheerService:
    """Owns and wires the bot's components.

    Parameters
    ----------
    settings : SettingModel
        Application settings
    store : IntegrationStore
        Installation and configuration storage
    gateway : DeliveryGateway
        Photo fetching and webhook posting
    oauth : Optional[SlackOAuth]
        Install flow client; ``None`` disables ``/install`` and ``/oauth``
    """

    def __init__(
        self,
        settings: SettingModel,
        store: IntegrationStore,
        gateway: DeliveryGateway,
        oauth: Optional[SlackOAuth] = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.gateway = gateway
        self.oauth = oauth
        self.handler = SadMessageHandler(store, gateway)
        self.queue: SequentialTaskQueue[QueuedMessage] = SequentialTaskQueue(self.handler.handle_event, name="messages")
        self.ingestor = EventIngestor(
            store, self.queue, restrict_to_installed_channel=settings.restrict_to_installed_channel
        )
        self.broadcast = DailyBroadcast(
            store,
            gateway,
            hour=settings.broadcast_hour,
            minute=settings.broadcast_minute,
            timezone=settings.broadcast_timezone,
        )
        self._started = False

    @classmethod
    def from_settings(cls, settings: Optional[SettingModel] = None) -> "CheerService":
        """Build the service and its collaborators from settings.

        Parameters
        ----------
        settings : Optional[SettingModel]
            Settings to use, the global settings by default

        Returns
        -------
        CheerService
            A service ready to be started
        """
        settings = settings or get_settings()

        if settings.unsplash_access_key is None:
            _LOG.warning("UNSPLASH_ACCESS_KEY is not set, photo requests will be rejected by Unsplash")
        access_key = settings.unsplash_access_key.get_secret_value() if settings.unsplash_access_key else ""
        images = UnsplashClient(
            access_key,
            query=ImageQuery(
                query=settings.image_query,
                orientation=settings.image_orientation,
                width=settings.image_width,
                height=settings.image_height,
            ),
            timeout=settings.http_timeout,
        )
        gateway = DeliveryGateway(images, WebhookPoster(timeout=int(settings.http_timeout)))

        oauth: Optional[SlackOAuth] = None
        if settings.slack_client_id and settings.slack_client_secret:
            oauth = SlackOAuth(
                client_id=settings.slack_client_id,
                client_secret=settings.slack_client_secret.get_secret_value(),
                redirect_uri=settings.oauth_redirect_uri,
                scopes=settings.scopes,
            )
        else:
            _LOG.warning("SLACK_CLIENT_ID / SLACK_CLIENT_SECRET not set, the install flow is disabled")

        return cls(settings, load_store(settings), gateway, oauth)

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Start background work (the daily broadcast scheduler)."""
        if self._started:
            return
        if self.settings.broadcast_enabled:
            self.broadcast.start()
        self._started = True
        _LOG.info("Cheer service started")

    async def stop(self) -> None:
        """Stop the scheduler, let queued work finish and release connections."""
        if not self._started:
            return
        self.broadcast.shutdown()
        await self.queue.shutdown(timeout=self.settings.queue_shutdown_timeout)
        await self.gateway.aclose()
        await self.store.close()
        self._started = False
        _LOG.info("Cheer service stopped")

    @asynccontextmanager
    async def lifespan(self, app: Any = None) -> AsyncIterator["CheerService"]:
        """Async context manager usable directly as a FastAPI ``lifespan``."""
        await self.start()
        try:
            yield self
        finally:
            await self.stop()

    def authorize_url(self) -> str:
        """URL that starts the Slack install flow.

        Raises
        ------
        OAuthNotConfiguredError
            If no Slack client credentials are configured
        """
        if self.oauth is None:
            raise OAuthNotConfiguredError("Slack OAuth is not configured")
        return self.oauth.authorize_url()

    async def install(self, code: str) -> IntegrationRecord:
        """Complete an installation from the OAuth *code*.

        Returns
        -------
        IntegrationRecord
            The stored record of the newly installed team

        Raises
        ------
        OAuthNotConfiguredError
            If no Slack client credentials are configured
        slack_sdk.errors.SlackApiError
            If Slack rejects the code
        KeyError
            If the response has no incoming webhook
        """
        if self.oauth is None:
            raise OAuthNotConfiguredError("Slack OAuth is not configured")
        data = await self.oauth.exchange_code(code)
        record = IntegrationRecord.from_oauth_response(data)
        await self.store.set(record.team_id, record)
        _LOG.info(f"Installed for team {record.team_id} in channel {record.channel or record.channel_id}")
        return record
