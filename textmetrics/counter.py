"""Word and character counting."""

from __future__ import annotations

from typing import Optional

from .models import CountResult
from .utils import strip_whitespace


def count(text: str) -> Optional[CountResult]:
    """Count words and characters in ``text``.

    Returns None for empty or whitespace-only text so callers can tell
    "nothing counted yet" apart from a counted result.
    """
    if not text or not text.strip():
        return None
    return CountResult(
        word_count=len(text.split()),
        char_count_excluding_spaces=len(strip_whitespace(text)),
        char_count_including_spaces=len(text),
    )
