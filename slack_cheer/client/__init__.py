"""Clients for the services the bot talks to: Unsplash, incoming webhooks and Slack OAuth."""

from .oauth import SlackOAuth
from .unsplash import ImageProviderError, ImageQuery, UnsplashClient
from .webhook import WebhookPoster

__all__ = ["ImageProviderError", "ImageQuery", "SlackOAuth", "UnsplashClient", "WebhookPoster"]
