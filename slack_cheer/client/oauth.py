"""Slack OAuth install flow.

Builds the "Add to Slack" authorize URL and exchanges the temporary code Slack
sends back to the redirect URI for an access token plus an incoming webhook.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Optional, Sequence

from slack_sdk.oauth import AuthorizeUrlGenerator
from slack_sdk.web.async_client import AsyncWebClient

__all__: list[str] = ["SLACK_AUTHORIZE_URL", "SlackOAuth"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

SLACK_AUTHORIZE_URL: Final[str] = "https://slack.com/oauth/authorize"


class SlackOAuth:
    """Thin wrapper over the ``oauth.access`` exchange.

    Parameters
    ----------
    client_id : str
        The Slack app client id
    client_secret : str
        The Slack app client secret
    redirect_uri : str
        The redirect URI registered for the app (``<BASE_URL>/oauth``)
    scopes : Sequence[str]
        Scopes requested at install time
    client : Optional[AsyncWebClient]
        Web client to use for the exchange, a token-less one by default
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Sequence[str],
        client: Optional[AsyncWebClient] = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._client = client or AsyncWebClient()
        self._url_generator = AuthorizeUrlGenerator(
            client_id=client_id,
            scopes=list(scopes),
            redirect_uri=redirect_uri,
            authorization_url=SLACK_AUTHORIZE_URL,
        )

    def authorize_url(self, state: str = "") -> str:
        """Return the URL that starts the install flow."""
        return self._url_generator.generate(state=state)

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        """Exchange an OAuth *code* for the installation payload.

        Returns
        -------
        Dict[str, Any]
            The ``oauth.access`` response body (``team_id``, ``incoming_webhook``...)

        Raises
        ------
        slack_sdk.errors.SlackApiError
            If Slack rejects the code
        """
        response = await self._client.oauth_access(
            client_id=self._client_id,
            client_secret=self._client_secret,
            code=code,
            redirect_uri=self._redirect_uri,
        )
        _LOG.info(f"OAuth exchange succeeded for team {response.get('team_id')}")
        return dict(response.data)
