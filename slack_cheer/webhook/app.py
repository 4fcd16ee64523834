"""
FastAPI web app factory for the cheer bot.

The factory keeps a single FastAPI instance per process. Its lifespan is the
lifespan of the :class:`~slack_cheer.service.CheerService` it is bound to, so
starting and stopping the ASGI server starts and stops the queue's owner, the
scheduler and the outbound clients.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, Type

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slack_cheer import __version__
from slack_cheer._base import BaseServerFactory

if TYPE_CHECKING:
    from slack_cheer.service import CheerService

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class WebServerFactory(BaseServerFactory[FastAPI]):
    @classmethod
    def _build(cls, **kwargs) -> FastAPI:
        """
        Create and configure the web API server.

        Args:
            **kwargs: ``service`` (required), the CheerService whose lifespan the app runs

        Returns:
            Configured FastAPI server instance
        """
        service: "CheerService" = kwargs["service"]
        settings = service.settings

        app = FastAPI(
            title="Slack Cheer Bot",
            description="Answers sad Slack messages with photos of cute animals",
            version=__version__,
            lifespan=service.lifespan,
        )
        app.state.service = service

        # Configure CORS
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.split_csv(settings.cors_allow_origins),
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.split_csv(settings.cors_allow_methods),
            allow_headers=settings.split_csv(settings.cors_allow_headers),
        )
        _LOG.debug("Web server instance created")
        return app


web_factory: Final[Type[WebServerFactory]] = WebServerFactory
