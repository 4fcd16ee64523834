"""Data models used across the bot.

- Pydantic models for the Slack Events API envelopes received on the events route
- The installation record persisted for every team (:class:`IntegrationRecord`)
- Plain dataclasses for the queued message and the photo returned by the image provider

Examples
--------
.. code-block:: python

    from slack_cheer.models import EventCallbackModel, deserialize

    envelope = deserialize({
        "type": "event_callback",
        "token": "XXYYZZ",
        "team_id": "T123",
        "event": {"type": "message", "channel": "C123", "user": "U123", "text": "so sad"},
    })
    assert isinstance(envelope, EventCallbackModel)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__: list[str] = [
    "UrlVerificationModel",
    "SlackEventItem",
    "EventCallbackModel",
    "GenericEnvelopeModel",
    "SlackEnvelope",
    "deserialize",
    "IntegrationRecord",
    "QueuedMessage",
    "Photo",
]


class UrlVerificationModel(BaseModel):
    """One-time handshake Slack sends when the events URL is configured."""

    model_config = ConfigDict(extra="allow")

    type: Literal["url_verification"] = "url_verification"
    token: str
    challenge: str


class SlackEventItem(BaseModel):
    """The inner ``event`` object of an ``event_callback`` envelope.

    Only the fields the bot reads are declared; everything else Slack sends
    is kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    subtype: Optional[str] = None
    text: Optional[str] = None
    user: Optional[str] = None
    channel: Optional[str] = None
    bot_id: Optional[str] = None
    ts: Optional[str] = None

    @property
    def is_bot_message(self) -> bool:
        """Whether the message was posted by a bot (including this one)."""
        return self.subtype == "bot_message" or self.bot_id is not None


class EventCallbackModel(BaseModel):
    """Envelope wrapping a regular workspace event."""

    model_config = ConfigDict(extra="allow")

    type: Literal["event_callback"] = "event_callback"
    token: Optional[str] = None
    team_id: str
    api_app_id: Optional[str] = None
    event: SlackEventItem
    event_id: Optional[str] = None
    event_time: Optional[int] = None


class GenericEnvelopeModel(BaseModel):
    """Any other envelope type (e.g. ``app_rate_limited``)."""

    model_config = ConfigDict(extra="allow")

    type: str
    token: Optional[str] = None
    team_id: Optional[str] = None


SlackEnvelope = Union[UrlVerificationModel, EventCallbackModel, GenericEnvelopeModel]


def deserialize(data: Dict[str, Any]) -> SlackEnvelope:
    """Build the envelope model matching ``data["type"]``.

    Parameters
    ----------
    data : Dict[str, Any]
        The decoded JSON body of an Events API request

    Returns
    -------
    SlackEnvelope
        The validated envelope

    Raises
    ------
    pydantic.ValidationError
        If the payload does not match the model for its type
    """
    envelope_type = data.get("type") if isinstance(data, dict) else None
    if envelope_type == "url_verification":
        return UrlVerificationModel.model_validate(data)
    if envelope_type == "event_callback":
        return EventCallbackModel.model_validate(data)
    return GenericEnvelopeModel.model_validate(data)


class IntegrationRecord(BaseModel):
    """A team that installed the app, and where to deliver its messages."""

    team_id: str
    endpoint_url: str = Field(description="Incoming webhook URL created during installation")
    channel_id: Optional[str] = None
    channel: Optional[str] = None
    team_name: Optional[str] = None

    @classmethod
    def from_oauth_response(cls, data: Dict[str, Any]) -> "IntegrationRecord":
        """Build a record from the body of an ``oauth.access`` response.

        Raises
        ------
        KeyError
            If the response carries no team id or incoming webhook
        """
        webhook = data["incoming_webhook"]
        return cls(
            team_id=data["team_id"],
            endpoint_url=webhook["url"],
            channel_id=webhook.get("channel_id"),
            channel=webhook.get("channel"),
            team_name=data.get("team_name"),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class QueuedMessage:
    """
    A Slack message waiting for the sad-message handler.

    :param team_id: the workspace the message was posted in
    :param event_type: the inner event type (always ``message`` today)
    :param text: the message text, empty when Slack sent none
    :param user: the id of the user who wrote it
    :param channel: the channel it was posted to
    """

    team_id: str
    event_type: str
    text: str = ""
    user: Optional[str] = None
    channel: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Photo:
    """
    A photo picked by the image provider.

    :param image_url: direct URL of the resized image
    :param reference_url: page crediting the photo on the provider's site
    :param author_name: the photographer's display name
    """

    image_url: str
    reference_url: str
    author_name: str
