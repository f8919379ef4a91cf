"""
Exceptions raised by the extraction pipeline and the webpage fetcher.

Every error carries a fixed, actionable ``user_message`` so that callers can
tell the user what to try next (retry, another URL, manual paste, upload).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .models import ErrorKind, FetchAttemptOutcome


class TextMetricsError(Exception):
    """Base exception for all textmetrics errors."""

    user_message = "An unexpected error occurred while processing the text."

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message:
            self.user_message = user_message
        message = message or self.user_message
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Input errors
# =============================================================================


class InvalidInputError(TextMetricsError):
    user_message = "The provided input is not valid."


class InvalidUrlError(InvalidInputError):
    user_message = "Please enter a valid URL (e.g., https://example.com)"

    def __init__(self, url: str) -> None:
        super().__init__(self.user_message, {"url": url})


class UnsupportedFileTypeError(InvalidInputError):
    user_message = "Please select a valid PDF, DOCX, TXT, MD, or SRT file."

    def __init__(self, file_name: Optional[str], mime_type: Optional[str]) -> None:
        super().__init__(
            self.user_message,
            {"file_name": file_name, "mime_type": mime_type},
        )


# =============================================================================
# Document errors
# =============================================================================


class ReadError(TextMetricsError):
    user_message = (
        "Failed to read text file. Please make sure the file is a valid text file and try again."
    )


class ExtractionError(TextMetricsError):
    user_message = "Failed to extract text from the file."


class NoTextExtractedError(ExtractionError):
    user_message = (
        "No text could be extracted from this file. It may be a scanned document or contain "
        "only images, which cannot be processed for text. Please try another file."
    )


class OcrError(TextMetricsError):
    """OCR engine could not start or the document could not be opened."""

    user_message = "OCR processing failed."


# =============================================================================
# Webpage errors
# =============================================================================


class FetchError(TextMetricsError):
    user_message = (
        "An unexpected error occurred while fetching the webpage. "
        "Please try again or use the file upload option."
    )


class NetworkError(FetchError):
    user_message = (
        "Network request failed. Please check your internet connection and try again, "
        "or use the file upload option instead."
    )


class FetchTimeoutError(FetchError):
    user_message = (
        "Request timed out. The website may be slow or unresponsive. "
        "Please try again or use the file upload option."
    )


class InvalidResponseError(FetchError):
    user_message = "Received an empty or invalid response instead of a webpage."


class HttpStatusError(FetchError):
    """The remote server answered with a non-2xx status."""

    _STATUS_MESSAGES = {
        403: (
            "Access to this webpage is forbidden. The website may be blocking automated "
            "requests. Try copying the text manually."
        ),
        404: "The webpage could not be found (404 error). Please check the URL and try again.",
        500: (
            "The website server returned an error (500). Please try again later "
            "or use the file upload option."
        ),
    }

    def __init__(self, status_code: int, url: Optional[str] = None) -> None:
        self.status_code = status_code
        super().__init__(f"HTTP error! status: {status_code}", {"status_code": status_code, "url": url})

    @property
    def user_message(self) -> str:  # type: ignore[override]
        if self.status_code in self._STATUS_MESSAGES:
            return self._STATUS_MESSAGES[self.status_code]
        if self.status_code >= 500:
            return self._STATUS_MESSAGES[500]
        return f"The website responded with an error (HTTP {self.status_code})."


class EmptyContentError(FetchError):
    user_message = "No readable text content found on the webpage."


class AllTransportsFailedError(FetchError):
    user_message = (
        "All proxy services failed to fetch the webpage. This might be due to:\n"
        "• The website blocking automated requests\n"
        "• All proxy services being temporarily unavailable\n"
        "• The website requiring authentication\n"
        "• Network connectivity issues\n"
        "\n"
        "Alternatives:\n"
        "• Copy and paste the text manually\n"
        "• Use the file upload option\n"
        "• Try a different URL from the same website"
    )

    def __init__(self, url: str, attempts: Sequence[FetchAttemptOutcome]) -> None:
        self.url = url
        self.attempts: List[FetchAttemptOutcome] = list(attempts)
        super().__init__(
            self.user_message,
            {"url": url, "attempts": len(self.attempts)},
        )

    def probable_cause(self) -> Optional[FetchError]:
        """Map the direct request's failure to a specific fetch error, if known."""
        for attempt in self.attempts:
            if attempt.transport_id != "direct" or attempt.success:
                continue
            if attempt.error_kind is ErrorKind.TIMEOUT:
                return FetchTimeoutError(attempt.detail)
            if attempt.error_kind is ErrorKind.NETWORK:
                return NetworkError(attempt.detail)
            if attempt.error_kind is ErrorKind.HTTP_STATUS and attempt.status_code:
                return HttpStatusError(attempt.status_code, self.url)
        return None


def describe_error(exc: BaseException) -> str:
    """Return the user-facing message for any exception.

    When every transport failed, the message for the direct request's failure
    comes first so the caller sees the specific remedy before the general one.
    """
    if isinstance(exc, AllTransportsFailedError):
        cause = exc.probable_cause()
        if cause is not None:
            return f"{cause.user_message}\n\n{exc.user_message}"
    if isinstance(exc, TextMetricsError):
        return exc.user_message
    return TextMetricsError.user_message
