"""Unit tests for :pymod:`slack_cheer.models`."""

import pytest
from pydantic import ValidationError

from slack_cheer.models import (
    EventCallbackModel,
    GenericEnvelopeModel,
    IntegrationRecord,
    QueuedMessage,
    UrlVerificationModel,
    deserialize,
)


class TestDeserialize:
    def test_url_verification(self) -> None:
        envelope = deserialize({"type": "url_verification", "token": "XXYYZZ", "challenge": "abc"})

        assert isinstance(envelope, UrlVerificationModel)
        assert envelope.token == "XXYYZZ"
        assert envelope.challenge == "abc"

    def test_url_verification_requires_challenge(self) -> None:
        with pytest.raises(ValidationError):
            deserialize({"type": "url_verification", "token": "XXYYZZ"})

    def test_event_callback(self) -> None:
        envelope = deserialize(
            {
                "type": "event_callback",
                "token": "XXYYZZ",
                "team_id": "T1",
                "api_app_id": "A1",
                "event": {
                    "type": "message",
                    "channel": "C1",
                    "user": "U1",
                    "text": "so sad",
                    "ts": "1355517523.000005",
                    "channel_type": "channel",
                },
                "event_id": "Ev1",
                "event_time": 1355517523,
            }
        )

        assert isinstance(envelope, EventCallbackModel)
        assert envelope.team_id == "T1"
        assert envelope.event.type == "message"
        assert envelope.event.text == "so sad"
        assert envelope.event.model_extra == {"channel_type": "channel"}
        assert envelope.event.is_bot_message is False

    def test_event_callback_requires_team(self) -> None:
        with pytest.raises(ValidationError):
            deserialize({"type": "event_callback", "token": "XXYYZZ", "event": {"type": "message"}})

    @pytest.mark.parametrize(
        "event",
        [
            {"type": "message", "subtype": "bot_message", "text": "sad"},
            {"type": "message", "bot_id": "B1", "text": "sad"},
        ],
    )
    def test_bot_messages(self, event) -> None:
        envelope = deserialize({"type": "event_callback", "token": "t", "team_id": "T1", "event": event})

        assert envelope.event.is_bot_message is True

    def test_other_envelope(self) -> None:
        envelope = deserialize({"type": "app_rate_limited", "token": "XXYYZZ", "team_id": "T1"})

        assert isinstance(envelope, GenericEnvelopeModel)
        assert envelope.type == "app_rate_limited"

    def test_missing_type(self) -> None:
        with pytest.raises(ValidationError):
            deserialize({"token": "XXYYZZ"})


class TestIntegrationRecord:
    def test_from_oauth_response(self) -> None:
        record = IntegrationRecord.from_oauth_response(
            {
                "ok": True,
                "team_id": "T1",
                "team_name": "Acme",
                "incoming_webhook": {
                    "url": "https://hooks.slack.com/services/T1/B1/xyz",
                    "channel": "#general",
                    "channel_id": "C1",
                },
            }
        )

        assert record == IntegrationRecord(
            team_id="T1",
            endpoint_url="https://hooks.slack.com/services/T1/B1/xyz",
            channel_id="C1",
            channel="#general",
            team_name="Acme",
        )

    def test_from_oauth_response_without_webhook(self) -> None:
        with pytest.raises(KeyError):
            IntegrationRecord.from_oauth_response({"ok": True, "team_id": "T1"})

    def test_json_round_trip(self) -> None:
        record = IntegrationRecord(team_id="T1", endpoint_url="https://hooks.slack.com/x")

        assert IntegrationRecord.model_validate_json(record.model_dump_json()) == record


def test_queued_message_defaults() -> None:
    message = QueuedMessage(team_id="T1", event_type="message")

    assert message.text == ""
    assert message.user is None
    assert message.channel is None
