"""Decide whether a Slack message deserves a comforting reply."""

from __future__ import annotations

from typing import Final, Optional

__all__: list[str] = ["SAD_MARKERS", "is_sad"]

SAD_MARKERS: Final[tuple[str, ...]] = (":(", "sad")


def is_sad(text: Optional[str]) -> bool:
    """Return ``True`` when *text* contains a sad-face emoticon or the word "sad".

    The match is a case-insensitive substring test, so ``"SADNESS"`` matches and
    ``""`` does not. ``None`` (messages without text) is treated as empty.

    Examples
    --------
    .. code-block:: python

        >>> is_sad("I feel :( today")
        True
        >>> is_sad("great day")
        False
    """
    if not text:
        return False
    normalized = text.lower()
    return any(marker in normalized for marker in SAD_MARKERS)
