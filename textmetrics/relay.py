"""HTTP relay that fetches pages server-side for clients blocked by CORS.

Run with::

    textmetrics serve --port 8000

and point ``TEXTMETRICS_RELAY_URL`` at ``http://localhost:8000/api/fetch-content``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import requests
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import BROWSER_HEADERS
from .errors import (
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    describe_error,
)
from .transports import validate_html
from .utils import is_valid_url

logger = logging.getLogger("textmetrics.relay")

RELAY_PATH = "/api/fetch-content"
UPSTREAM_TIMEOUT = 15.0

app = FastAPI(title="textmetrics relay", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def fetch_upstream(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = UPSTREAM_TIMEOUT,
) -> str:
    """Fetch ``url`` and return its HTML if it passes the sanity checks."""
    http = session or requests
    headers = dict(BROWSER_HEADERS, **{"Cache-Control": "no-cache"})
    try:
        response = http.get(url, headers=headers, timeout=timeout)
    except requests.Timeout as exc:
        raise FetchTimeoutError(str(exc)) from exc
    except requests.RequestException as exc:
        raise NetworkError(str(exc)) from exc
    if not 200 <= response.status_code < 300:
        raise HttpStatusError(response.status_code, url)
    return validate_html(response.text)


@app.get(RELAY_PATH)
def fetch_content(url: Optional[str] = None) -> JSONResponse:
    if not url:
        return JSONResponse({"error": "URL parameter is required"}, status_code=400)
    if not is_valid_url(url):
        return JSONResponse({"error": "Invalid URL format"}, status_code=400)

    logger.info("Fetching content from: %s", url)
    try:
        html = fetch_upstream(url)
    except FetchError as exc:
        logger.error("Error fetching content from %s: %s", url, exc.message)
        return JSONResponse(
            {
                "error": describe_error(exc),
                "originalError": exc.message,
                "url": url,
                "timestamp": _timestamp(),
            },
            status_code=500,
        )

    logger.info("Successfully fetched content, length: %d", len(html))
    return JSONResponse(
        {
            "content": html,
            "length": len(html),
            "url": url,
            "timestamp": _timestamp(),
        }
    )


@app.options(RELAY_PATH)
def preflight() -> Response:
    return Response(status_code=200)


@app.api_route(RELAY_PATH, methods=["POST", "PUT", "PATCH", "DELETE"])
def method_not_allowed() -> JSONResponse:
    return JSONResponse({"error": "Method not allowed"}, status_code=405)


def serve(host: str = "127.0.0.1", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run(app, host=host, port=port)
