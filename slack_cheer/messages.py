"""Slack message payloads posted by the bot."""

from __future__ import annotations

from typing import Any, Dict, Final

from slack_cheer.models import Photo

__all__: list[str] = ["CHEER_PRETEXT", "COMFORT_PRETEXT", "build_cheer_payload", "build_comfort_payload", "photo_footer"]

CHEER_PRETEXT: Final[str] = "Smile! :) It's going to be a good day"
COMFORT_PRETEXT: Final[str] = "I'm really sorry to see you sad, {mention}. Here, have this pic of a cute animal"


def photo_footer(photo: Photo) -> str:
    # Both the photographer and Unsplash must be credited.
    return f"By <{photo.reference_url}|{photo.author_name}> from <https://unsplash.com|Unsplash>"


def _attachment(pretext: str, photo: Photo) -> Dict[str, Any]:
    return {
        "attachments": [
            {
                "pretext": pretext,
                "image_url": photo.image_url,
                "footer": photo_footer(photo),
            }
        ]
    }


def build_cheer_payload(photo: Photo) -> Dict[str, Any]:
    """Payload for the daily broadcast and the post-install welcome."""
    return _attachment(CHEER_PRETEXT, photo)


def build_comfort_payload(photo: Photo, user_id: str | None) -> Dict[str, Any]:
    """Payload answering a sad message, mentioning its author."""
    mention = f"<@{user_id}>" if user_id else "friend"
    return _attachment(COMFORT_PRETEXT.format(mention=mention), photo)
