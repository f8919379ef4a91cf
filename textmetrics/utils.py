"""Utility helpers for whitespace normalization and URL handling."""

from __future__ import annotations

import re
from urllib.parse import urlparse

WHITESPACE_PATTERN = re.compile(r"\s+")
INLINE_WHITESPACE_PATTERN = re.compile(r"[^\S\n]+")
LINE_BREAK_RUN_PATTERN = re.compile(r"\s*\n\s*")


def strip_whitespace(value: str) -> str:
    """Remove every whitespace character, Unicode spaces included."""
    return WHITESPACE_PATTERN.sub("", value)


def collapse_whitespace(value: str) -> str:
    """Collapse space runs to one space and blank-line runs to one newline."""
    collapsed = INLINE_WHITESPACE_PATTERN.sub(" ", value)
    collapsed = LINE_BREAK_RUN_PATTERN.sub("\n", collapsed)
    return collapsed.strip()


def is_valid_url(value: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    if not value or not value.strip():
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
