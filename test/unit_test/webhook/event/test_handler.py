"""Unit tests for :pymod:`slack_cheer.webhook.event.handler`."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from slack_cheer.backends.store.memory import MemoryStore
from slack_cheer.gateway import DeliveryGateway
from slack_cheer.models import IntegrationRecord, QueuedMessage
from slack_cheer.webhook.event.handler import EventHandler, SadMessageHandler

URL = "https://hooks.slack.com/services/T1/B1/xyz"


@pytest.fixture
def gateway() -> MagicMock:
    gateway = MagicMock(spec=DeliveryGateway)
    gateway.send_comfort = AsyncMock(return_value=True)
    return gateway


def _message(text: str, team_id: str = "T1", user: str = "U1") -> QueuedMessage:
    return QueuedMessage(team_id=team_id, event_type="message", text=text, user=user, channel="C1")


def test_satisfies_protocol(gateway: MagicMock) -> None:
    assert isinstance(SadMessageHandler(MemoryStore(), gateway), EventHandler)


@pytest.mark.asyncio
async def test_sad_message_gets_comfort(gateway: MagicMock) -> None:
    store = MemoryStore()
    await store.set("T1", IntegrationRecord(team_id="T1", endpoint_url=URL, channel_id="C1"))
    handler = SadMessageHandler(store, gateway)

    await handler.handle_event(_message("feeling sad today"))

    gateway.send_comfort.assert_awaited_once_with(URL, "U1")


@pytest.mark.asyncio
async def test_happy_message_is_ignored(gateway: MagicMock) -> None:
    store = MagicMock(spec=MemoryStore)
    store.get = AsyncMock()
    handler = SadMessageHandler(store, gateway)

    await handler.handle_event(_message("what a great day"))

    store.get.assert_not_awaited()
    gateway.send_comfort.assert_not_awaited()


@pytest.mark.asyncio
async def test_uninstalled_team_is_dropped(gateway: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
    handler = SadMessageHandler(MemoryStore(), gateway)

    await handler.handle_event(_message(":(", team_id="T9"))

    gateway.send_comfort.assert_not_awaited()
    assert "T9 is no longer installed" in caplog.text


@pytest.mark.asyncio
async def test_store_errors_propagate(gateway: MagicMock) -> None:
    store = MagicMock(spec=MemoryStore)
    store.get = AsyncMock(side_effect=ConnectionError("redis down"))
    handler = SadMessageHandler(store, gateway)

    with pytest.raises(ConnectionError):
        await handler.handle_event(_message("sad"))
