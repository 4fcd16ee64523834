"""Ingestion boundary for Slack Events API envelopes.

Decides, for every envelope received on the events route, whether it is
forwarded to the sequential task queue. Nothing here raises for a bad
envelope: the HTTP layer always acknowledges, and the outcome is only used
for logging and for choosing the response body. Integration store errors do
propagate; the events route logs them and still acknowledges.

Decision order
==============
1. Envelope does not validate: reject
2. ``url_verification``: remember the verification token, echo the challenge
3. Verification token differs from the remembered one: reject
4. Not an ``event_callback``: ignore
5. ``app_uninstalled``: delete the team's installation
6. Not a ``message`` or posted by a bot: ignore
7. Channel differs from the one chosen at install time (when enabled): ignore
8. Otherwise enqueue exactly once
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Final, Optional, Protocol

from pydantic import ValidationError

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.models import EventCallbackModel, QueuedMessage, UrlVerificationModel, deserialize

__all__: list[str] = [
    "EVENTS_TOKEN_KEY",
    "EventIngestor",
    "IngestOutcome",
    "IngestResult",
    "MessageQueue",
]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

# Config key under which the Events API verification token is kept
EVENTS_TOKEN_KEY: Final[str] = "events_token"


class MessageQueue(Protocol):
    def enqueue(self, item: QueuedMessage) -> None: ...


class IngestOutcome(str, Enum):
    """What the ingestion boundary did with an envelope."""

    CHALLENGE = "challenge"
    ENQUEUED = "enqueued"
    UNINSTALLED = "uninstalled"
    IGNORED = "ignored"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class IngestResult:
    outcome: IngestOutcome
    reason: Optional[str] = None
    challenge: Optional[str] = None


class EventIngestor:
    """Validate and filter envelopes, forwarding qualifying messages.

    Parameters
    ----------
    store : IntegrationStore
        Holds the verification token and the installed channel of each team
    queue : MessageQueue
        Receives accepted messages through ``enqueue``
    restrict_to_installed_channel : bool
        Only forward messages posted in the channel selected at install time
    """

    def __init__(
        self, store: IntegrationStore, queue: MessageQueue, *, restrict_to_installed_channel: bool = True
    ) -> None:
        self._store = store
        self._queue = queue
        self._restrict_to_installed_channel = restrict_to_installed_channel

    async def ingest(self, payload: Dict[str, Any]) -> IngestResult:
        """Apply the decision order to one decoded envelope.

        Parameters
        ----------
        payload : Dict[str, Any]
            The JSON body of the Events API request

        Returns
        -------
        IngestResult
            The outcome, with the challenge to echo for ``url_verification``
        """
        try:
            envelope = deserialize(payload)
        except ValidationError as e:
            _LOG.warning(f"Malformed Slack envelope: {e.error_count()} validation error(s)")
            return IngestResult(IngestOutcome.REJECTED, reason="malformed envelope")

        if isinstance(envelope, UrlVerificationModel):
            _LOG.info("Handling URL verification challenge")
            await self._store.set_config(EVENTS_TOKEN_KEY, envelope.token)
            return IngestResult(IngestOutcome.CHALLENGE, challenge=envelope.challenge)

        if not await self._token_matches(envelope.token):
            _LOG.warning(f"Rejected envelope with an unknown verification token (type={envelope.type})")
            return IngestResult(IngestOutcome.REJECTED, reason="verification token mismatch")

        if not isinstance(envelope, EventCallbackModel):
            return self._ignore(f"envelope type '{envelope.type}'")

        event = envelope.event
        if event.type == "app_uninstalled":
            _LOG.info(f"App uninstalled from team {envelope.team_id}, deleting integration")
            await self._store.delete(envelope.team_id)
            return IngestResult(IngestOutcome.UNINSTALLED)

        if event.type != "message":
            return self._ignore(f"event type '{event.type}'")
        if event.is_bot_message:
            return self._ignore("bot message")

        if self._restrict_to_installed_channel:
            record = await self._store.get(envelope.team_id)
            if record is None or record.channel_id != event.channel:
                return self._ignore(f"channel {event.channel} is not the installed channel of {envelope.team_id}")

        self._queue.enqueue(
            QueuedMessage(
                team_id=envelope.team_id,
                event_type=event.type,
                text=event.text or "",
                user=event.user,
                channel=event.channel,
            )
        )
        return IngestResult(IngestOutcome.ENQUEUED)

    async def _token_matches(self, token: Optional[str]) -> bool:
        expected = await self._store.get_config(EVENTS_TOKEN_KEY)
        if not expected or not token:
            return False
        return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))

    @staticmethod
    def _ignore(reason: str) -> IngestResult:
        _LOG.debug(f"Ignoring Slack event: {reason}")
        return IngestResult(IngestOutcome.IGNORED, reason=reason)
