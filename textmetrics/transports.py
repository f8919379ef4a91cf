"""Public proxy relays used when a page cannot be fetched directly."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import List
from urllib.parse import quote

from .errors import HttpStatusError, InvalidResponseError

JSONP_PATTERN = re.compile(r"callback\((.*)\)", re.DOTALL)
HTML_MARKERS = ("<html", "<body", "<div")


class Envelope(str, Enum):
    """How a proxy wraps the page it fetched."""

    RAW = "raw"
    JSON = "json"
    JSONP = "jsonp"


@dataclass(frozen=True)
class ProxyProvider:
    name: str
    template: str
    envelope: Envelope = Envelope.RAW

    def build_url(self, url: str) -> str:
        return self.template.format(url=url, quoted=quote(url, safe=""))

    def unwrap(self, body: str) -> str:
        if self.envelope is Envelope.JSON:
            return _unwrap_json(body)
        if self.envelope is Envelope.JSONP:
            return _unwrap_jsonp(body)
        return body


# Tried strictly in this order.
PROXY_PROVIDERS: List[ProxyProvider] = [
    ProxyProvider("thingproxy", "https://thingproxy.freeboard.io/fetch/{url}"),
    ProxyProvider("codetabs", "https://api.codetabs.com/v1/proxy?quest={quoted}"),
    ProxyProvider("proxy6", "https://proxy6.ga/?url={quoted}"),
    ProxyProvider("allorigins-get", "https://api.allorigins.win/get?url={quoted}", Envelope.JSON),
    ProxyProvider("afeld-jsonp", "https://jsonp.afeld.me/?url={quoted}", Envelope.JSONP),
    ProxyProvider("cors-anywhere", "https://cors-anywhere.herokuapp.com/{url}"),
    ProxyProvider("codetabs-apikey", "https://api.codetabs.com/v1/proxy?quest={quoted}&apikey=test"),
    ProxyProvider("thingproxy-nocache", "https://thingproxy.freeboard.io/fetch/{url}?bypass-cache=true"),
    ProxyProvider("allorigins-raw", "https://api.allorigins.win/raw?url={quoted}"),
    ProxyProvider("corsproxy", "https://corsproxy.io/?{quoted}"),
]


def _text_field(value: object, fallback: str = "") -> str:
    if value is None or value == "":
        return fallback
    if not isinstance(value, str):
        raise InvalidResponseError(
            f"Proxy returned {type(value).__name__} content instead of text"
        )
    return value


def _unwrap_json(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise InvalidResponseError(f"Proxy returned malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidResponseError("Proxy returned an unexpected JSON payload")
    status = data.get("status") or {}
    http_code = status.get("http_code") if isinstance(status, dict) else None
    if http_code:
        try:
            code = int(http_code)
        except (TypeError, ValueError) as exc:
            raise InvalidResponseError(f"Proxy reported an unreadable status: {http_code!r}") from exc
        if code != 200:
            raise HttpStatusError(code)
    return _text_field(data.get("contents"))


def _unwrap_jsonp(body: str) -> str:
    match = JSONP_PATTERN.search(body)
    if not match:
        return body
    try:
        data = json.loads(match.group(1))
    except ValueError as exc:
        raise InvalidResponseError(f"Proxy returned malformed JSONP: {exc}") from exc
    if not isinstance(data, dict):
        return body
    return _text_field(data.get("contents") or data.get("body"), fallback=body)


def validate_html(content: str, min_chars: int = 50) -> str:
    """Reject empty shells and error pages served with a 2xx status."""
    if not isinstance(content, str) or len(content.strip()) < min_chars:
        raise InvalidResponseError("Received empty or invalid response")
    if not any(marker in content for marker in HTML_MARKERS):
        raise InvalidResponseError("Response does not appear to be HTML content")
    return content
