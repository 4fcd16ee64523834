"""Handlers for messages drained from the sequential task queue.

The queue calls :meth:`SadMessageHandler.handle_event` once per queued
message, in arrival order. The handler decides whether the text is sad and,
if so, answers with a comforting photo in the team's installed channel.

Quick Example
=============
.. code-block:: python

    from slack_cheer.backends.queue import SequentialTaskQueue
    from slack_cheer.webhook.event.handler import SadMessageHandler

    handler = SadMessageHandler(store, gateway)
    queue = SequentialTaskQueue(handler.handle_event, name="messages")
"""

from __future__ import annotations

import logging
from typing import Final, Protocol, runtime_checkable

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.classifier import is_sad
from slack_cheer.gateway import DeliveryGateway
from slack_cheer.models import QueuedMessage

__all__ = ["EventHandler", "SadMessageHandler"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


@runtime_checkable
class EventHandler(Protocol):
    """Protocol for objects that can handle queued Slack messages.

    Example
    -------
    .. code-block:: python

        class MyHandler:
            async def handle_event(self, message: QueuedMessage) -> None:
                print(message.text)
    """

    async def handle_event(self, message: QueuedMessage) -> None:
        """Handle one queued message.

        Parameters
        ----------
        message : QueuedMessage
            The message taken from the head of the queue
        """
        ...


class SadMessageHandler(EventHandler):
    """Reply to sad messages with a photo of a cute animal.

    Errors from the store propagate to the queue (which reports them to the
    event loop); photo and delivery failures are absorbed by the gateway.

    Parameters
    ----------
    store : IntegrationStore
        Where the team's incoming webhook URL is looked up
    gateway : DeliveryGateway
        Fetches the photo and posts the reply
    """

    def __init__(self, store: IntegrationStore, gateway: DeliveryGateway) -> None:
        self._store = store
        self._gateway = gateway

    async def handle_event(self, message: QueuedMessage) -> None:
        _LOG.debug(f"Processing message team={message.team_id} channel={message.channel} user={message.user}")
        if not is_sad(message.text):
            return

        record = await self._store.get(message.team_id)
        if record is None:
            _LOG.info(f"Team {message.team_id} is no longer installed, dropping sad message")
            return

        await self._gateway.send_comfort(record.endpoint_url, message.user)
