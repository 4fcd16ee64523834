"""Slack bot that cheers up sad channel members with photos of cute animals.

Subpackages
===========
- ``backends``: the sequential task queue and the integration stores
- ``client``: Unsplash, incoming webhook and OAuth clients
- ``webhook``: the FastAPI app, event ingestion and the CLI entry point
"""

__version__ = "0.1.0"
