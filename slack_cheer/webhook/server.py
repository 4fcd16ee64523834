"""Cheer bot webhook server implementation (FastAPI).

This module defines the routes of the FastAPI application: the Slack Events
API endpoint, the OAuth install flow and a health check. Accepted message
events are handed to the service's sequential task queue and processed after
the HTTP response has been sent.

Routes
======
- ``GET /``: landing page
- ``GET /health``: queue, store and scheduler status
- ``GET /install``: redirect to Slack's authorize page
- ``GET /oauth``: OAuth redirect target, stores the installation
- ``POST /events``: Slack Events API endpoint

Environment Variables
=====================
- ``SLACK_SIGNING_SECRET``: optional; when set, every event request must carry a valid signature
- ``SLACK_CLIENT_ID`` / ``SLACK_CLIENT_SECRET``: enable the install flow
- ``BASE_URL``: public URL used to build the OAuth redirect URI

Quick Examples
==============

.. code-block:: bash

    # URL verification
    curl -X POST http://localhost:3000/events \
         -H "Content-Type: application/json" \
         -d '{"type": "url_verification", "challenge": "abc123", "token": "XXYYZZ"}'

    # Health check
    curl http://localhost:3000/health
"""

from __future__ import annotations

import json
import logging
from typing import Final, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from slack_sdk.errors import SlackApiError
from slack_sdk.signature import SignatureVerifier

from slack_cheer.service import CheerService, OAuthNotConfiguredError

from .app import web_factory
from .ingestion import IngestOutcome

__all__: list[str] = [
    "create_slack_app",
    "verify_slack_request",
]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

MISSING_CODE_MESSAGE: Final[str] = "The oAuth request did not contain the required code."


async def verify_slack_request(request: Request, signing_secret: str) -> bool:
    """Verify that the request is coming from Slack.

    Parameters
    ----------
    request : Request
        The FastAPI request object
    signing_secret : str
        The Slack signing secret

    Returns
    -------
    bool
        True if the request is valid, False otherwise
    """
    verifier = SignatureVerifier(signing_secret)

    # Get request headers and body
    signature = request.headers.get("X-Slack-Signature")
    timestamp = request.headers.get("X-Slack-Request-Timestamp")

    body = await request.body()
    body_str = body.decode("utf-8", errors="replace")

    try:
        return verifier.is_valid(signature=signature, timestamp=timestamp, body=body_str)
    except ValueError:
        # Non-numeric timestamp header
        return False


def create_slack_app(service: Optional[CheerService] = None) -> FastAPI:
    """Create the FastAPI app bound to *service*.

    Parameters
    ----------
    service : Optional[CheerService]
        The service to bind; one is built from the global settings when omitted

    Returns
    -------
    FastAPI
        The FastAPI app
    """
    service = service or CheerService.from_settings()
    app = web_factory.create(service=service)

    @app.get("/", response_class=HTMLResponse)
    async def root() -> str:
        return "<h1>Hello world</h1>"

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint for monitoring and load balancers.

        Returns
        -------
        JSONResponse
            Status information about the webhook server
        """
        try:
            await service.store.get_config("_health_check")
            store_status = "healthy"
        except Exception as store_error:
            _LOG.warning(f"Integration store health check failed: {store_error}")
            store_status = f"unhealthy: {store_error}"

        is_healthy = store_status == "healthy"
        return JSONResponse(
            status_code=status.HTTP_200_OK if is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "healthy" if is_healthy else "unhealthy",
                "service": "slack-cheer-bot",
                "components": {
                    "integration_store": store_status,
                    "message_queue": {
                        "active": service.queue.active,
                        "pending": service.queue.pending,
                        "in_flight": service.queue.in_flight,
                    },
                    "daily_broadcast": "running" if service.broadcast.running else "stopped",
                },
            },
        )

    @app.get("/install")
    async def install() -> Response:
        """Redirect the browser to Slack's "Add to Slack" page."""
        try:
            return RedirectResponse(service.authorize_url())
        except OAuthNotConfiguredError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    @app.get("/oauth")
    async def oauth(
        background_tasks: BackgroundTasks,
        code: Optional[str] = None,
        error: Optional[str] = None,
    ) -> Response:
        """OAuth redirect target.

        Stores the installation, answers ``success`` and posts a welcome photo
        to the new incoming webhook once the response has been sent.
        """
        if error or not code:
            _LOG.warning(MISSING_CODE_MESSAGE)
            return PlainTextResponse(MISSING_CODE_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        try:
            record = await service.install(code)
        except OAuthNotConfiguredError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
        except SlackApiError as e:
            _LOG.error(f"Error getting oAuth response: {e.response.get('error')}")
            return PlainTextResponse("Slack rejected the installation.", status_code=status.HTTP_502_BAD_GATEWAY)
        except KeyError as e:
            _LOG.error(f"oAuth response is missing {e}")
            return PlainTextResponse(
                "Slack did not return an incoming webhook.", status_code=status.HTTP_502_BAD_GATEWAY
            )

        background_tasks.add_task(service.gateway.send_cheer, record.endpoint_url)
        return PlainTextResponse("success")

    @app.post("/events")
    async def slack_events(request: Request) -> Response:
        """Handle Slack Events API requests.

        Verifies the request signature when a signing secret is configured,
        answers URL verification challenges and hands every other envelope to
        the ingestion boundary. Envelopes that are rejected or ignored, and
        envelopes whose ingestion hit a store error, are still acknowledged
        with 200.

        Parameters
        ----------
        request : Request
            Incoming FastAPI request from Slack Events API

        Returns
        -------
        Response
            JSON response acknowledging the event or returning the challenge token
        """
        signing_secret = service.settings.slack_signing_secret
        if signing_secret is not None and not await verify_slack_request(
            request, signing_secret.get_secret_value()
        ):
            _LOG.warning("Invalid Slack request signature")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid request signature")

        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            _LOG.warning(f"Event request body is not JSON: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be JSON")

        try:
            result = await service.ingestor.ingest(payload)
        except Exception:
            _LOG.exception("Integration store failed while ingesting a Slack event")
            return JSONResponse(content={"status": "ok"})

        if result.outcome is IngestOutcome.CHALLENGE:
            return JSONResponse(content={"challenge": result.challenge})

        _LOG.debug(f"Event outcome: {result.outcome.value} ({result.reason or '-'})")
        return JSONResponse(content={"status": "ok"})

    return app
