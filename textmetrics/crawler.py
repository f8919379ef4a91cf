"""Webpage fetching through a chain of fallback transports."""

from __future__ import annotations

import logging
import os
import time
from functools import partial
from typing import Callable, Iterator, List, Optional, Tuple

import requests

from .config import BROWSER_HEADERS, PROXY_HEADERS, RELAY_URL_ENV, FetchConfig
from .content import html_to_text
from .errors import (
    AllTransportsFailedError,
    EmptyContentError,
    HttpStatusError,
    InvalidResponseError,
    InvalidUrlError,
)
from .models import ErrorKind, FetchAttemptOutcome
from .transports import PROXY_PROVIDERS, ProxyProvider, validate_html
from .utils import is_valid_url

logger = logging.getLogger("textmetrics.crawler")

Transport = Tuple[str, Callable[[], str]]


def _check_status(response: requests.Response) -> requests.Response:
    if not 200 <= response.status_code < 300:
        raise HttpStatusError(response.status_code, response.url)
    return response


class PageFetcher:
    """Fetch a webpage and reduce it to text.

    Transports are tried one after another: the relay endpoint, a direct
    request, then each public proxy in priority order. The first transport
    that yields usable content wins and the rest are never contacted.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        session: Optional[requests.Session] = None,
        providers: Optional[List[ProxyProvider]] = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.session = session or requests.Session()
        self.providers = list(PROXY_PROVIDERS if providers is None else providers)

    def _resolve_relay_endpoint(self) -> Optional[str]:
        endpoint = self.config.relay_endpoint or os.getenv(RELAY_URL_ENV)
        if not endpoint:
            return None
        if not is_valid_url(endpoint):
            logger.warning(
                "Relay endpoint %s is not a valid URL; skipping the relay transport",
                endpoint,
            )
            return None
        return endpoint

    def _fetch_via_relay(self, endpoint: str, url: str) -> str:
        response = _check_status(
            self.session.get(
                endpoint,
                params={"url": url},
                headers={"Accept": "application/json"},
                timeout=self.config.relay_timeout,
            )
        )
        try:
            data = response.json()
        except ValueError as exc:
            raise InvalidResponseError(f"Relay returned malformed JSON: {exc}") from exc
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise InvalidResponseError("Relay returned no content")
        return content

    def _fetch_direct(self, url: str) -> str:
        response = _check_status(
            self.session.get(url, headers=BROWSER_HEADERS, timeout=self.config.direct_timeout)
        )
        if not response.text.strip():
            raise InvalidResponseError("Received empty response")
        return response.text

    def _fetch_via_proxy(self, provider: ProxyProvider, url: str) -> str:
        response = _check_status(
            self.session.get(
                provider.build_url(url),
                headers=PROXY_HEADERS,
                timeout=self.config.proxy_timeout,
            )
        )
        html = provider.unwrap(response.text)
        return validate_html(html, self.config.min_html_chars)

    def _transports(self, url: str) -> Iterator[Transport]:
        endpoint = self._resolve_relay_endpoint()
        if endpoint:
            yield "relay", partial(self._fetch_via_relay, endpoint, url)
        else:
            logger.debug("No relay endpoint configured; skipping relay transport")
        yield "direct", partial(self._fetch_direct, url)
        for provider in self.providers:
            yield f"proxy:{provider.name}", partial(self._fetch_via_proxy, provider, url)

    def _attempt(self, transport_id: str, fetch: Callable[[], str]) -> FetchAttemptOutcome:
        start = time.perf_counter()
        try:
            content = fetch()
        except requests.Timeout as exc:
            outcome = FetchAttemptOutcome(
                transport_id, False, error_kind=ErrorKind.TIMEOUT, detail=str(exc)
            )
        except HttpStatusError as exc:
            outcome = FetchAttemptOutcome(
                transport_id,
                False,
                error_kind=ErrorKind.HTTP_STATUS,
                detail=exc.message,
                status_code=exc.status_code,
            )
        except InvalidResponseError as exc:
            outcome = FetchAttemptOutcome(
                transport_id, False, error_kind=ErrorKind.INVALID_RESPONSE, detail=exc.message
            )
        except EmptyContentError as exc:
            outcome = FetchAttemptOutcome(
                transport_id, False, error_kind=ErrorKind.EMPTY_CONTENT, detail=exc.message
            )
        except requests.RequestException as exc:
            outcome = FetchAttemptOutcome(
                transport_id, False, error_kind=ErrorKind.NETWORK, detail=str(exc)
            )
        else:
            logger.debug("%s answered in %.2fs", transport_id, time.perf_counter() - start)
            return FetchAttemptOutcome(transport_id, True, content=content)
        logger.warning("%s failed (%s): %s", transport_id, outcome.error_kind.value, outcome.detail)
        return outcome

    def _run_chain(
        self,
        url: str,
        reduce: Optional[Callable[[str], str]] = None,
    ) -> Tuple[str, List[FetchAttemptOutcome]]:
        if not is_valid_url(url):
            raise InvalidUrlError(url)
        url = url.strip()

        attempts: List[FetchAttemptOutcome] = []
        for transport_id, fetch in self._transports(url):
            if reduce is not None:
                fetch = partial(_reduced, reduce, fetch)
            logger.debug("Trying %s for %s", transport_id, url)
            outcome = self._attempt(transport_id, fetch)
            attempts.append(outcome)
            if outcome.success:
                logger.info("Fetched %s via %s", url, transport_id)
                return outcome.content, attempts

        logger.error("All %d transports failed for %s", len(attempts), url)
        raise AllTransportsFailedError(url, attempts)

    def fetch_html(self, url: str) -> Tuple[str, List[FetchAttemptOutcome]]:
        """Return the first accepted HTML and the attempts made to get it.

        Raises:
            InvalidUrlError: If ``url`` is not an absolute http(s) URL.
            AllTransportsFailedError: If no transport produced acceptable HTML.
        """
        return self._run_chain(url)

    def fetch_page_text(self, url: str) -> str:
        """Fetch ``url`` and return its readable text.

        A page that reduces to no text counts as a failed attempt and the
        next transport is tried.

        Raises:
            InvalidUrlError: If ``url`` is not an absolute http(s) URL.
            EmptyContentError: If every page that was fetched had no readable text.
            AllTransportsFailedError: If no transport produced acceptable HTML.
        """
        try:
            text, _ = self._run_chain(url, reduce=html_to_text)
        except AllTransportsFailedError as exc:
            if any(attempt.error_kind is ErrorKind.EMPTY_CONTENT for attempt in exc.attempts):
                raise EmptyContentError(details={"url": exc.url}) from exc
            raise
        return text


def _reduced(reduce: Callable[[str], str], fetch: Callable[[], str]) -> str:
    return reduce(fetch())


def fetch_page_text(
    url: str,
    config: Optional[FetchConfig] = None,
    session: Optional[requests.Session] = None,
) -> str:
    return PageFetcher(config, session).fetch_page_text(url)
