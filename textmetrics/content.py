"""HTML-to-text reduction for fetched webpages."""

from __future__ import annotations

from bs4 import BeautifulSoup

from .errors import EmptyContentError
from .utils import collapse_whitespace

NON_CONTENT_TAGS = [
    "script",
    "style",
    "head",
    "nav",
    "footer",
    "header",
    "aside",
    "noscript",
    "iframe",
    "img",
    "picture",
    "video",
    "audio",
    "canvas",
    "svg",
    "object",
    "embed",
    "meta",
    "link",
    "title",
]


def _clean_content(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove scripts, page chrome and embedded media."""
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    return soup


def html_to_text(html: str) -> str:
    """Reduce an HTML document to the readable text of its body.

    Markup without an explicit ``<body>`` is treated as body content, the way
    browsers parse fragments.

    Raises:
        EmptyContentError: If no readable text remains.
    """
    soup = _clean_content(BeautifulSoup(html, "html.parser"))
    body = soup.body or soup
    text = collapse_whitespace(body.get_text())
    if not text:
        raise EmptyContentError()
    return text
