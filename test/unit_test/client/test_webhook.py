"""Unit tests for :pymod:`slack_cheer.client.webhook`."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from slack_cheer.client.webhook import WebhookPoster

URL = "https://hooks.slack.com/services/T1/B1/xyz"


@pytest.fixture
def webhook_client_cls():
    """Patch the slack_sdk webhook client used by the poster."""
    with patch("slack_cheer.client.webhook.AsyncWebhookClient") as cls:
        yield cls


def _response(status_code: int, body: str = "ok") -> MagicMock:
    return MagicMock(status_code=status_code, body=body)


@pytest.mark.asyncio
async def test_post_success(webhook_client_cls: MagicMock) -> None:
    webhook_client_cls.return_value.send_dict = AsyncMock(return_value=_response(200))
    poster = WebhookPoster(timeout=5)

    assert await poster.post(URL, {"text": "hello"}) is True

    webhook_client_cls.assert_called_once_with(url=URL, timeout=5, session=None)
    webhook_client_cls.return_value.send_dict.assert_awaited_once_with({"text": "hello"})


@pytest.mark.asyncio
async def test_post_non_200_is_failure(webhook_client_cls: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
    webhook_client_cls.return_value.send_dict = AsyncMock(return_value=_response(404, "no_service"))

    assert await WebhookPoster().post(URL, {"text": "hello"}) is False
    assert "404" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()],
)
async def test_post_transport_error_is_failure(webhook_client_cls: MagicMock, error: Exception) -> None:
    webhook_client_cls.return_value.send_dict = AsyncMock(side_effect=error)

    assert await WebhookPoster().post(URL, {"text": "hello"}) is False


@pytest.mark.asyncio
async def test_post_reuses_given_session(webhook_client_cls: MagicMock) -> None:
    webhook_client_cls.return_value.send_dict = AsyncMock(return_value=_response(200))
    session = MagicMock(spec=aiohttp.ClientSession)

    await WebhookPoster(timeout=3, session=session).post(URL, {})

    webhook_client_cls.assert_called_once_with(url=URL, timeout=3, session=session)
