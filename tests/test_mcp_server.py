"""
Tests for the MCP tool functions.
"""

import asyncio

import pytest

from textmetrics import mcp_server
from textmetrics.errors import AllTransportsFailedError
from textmetrics.models import ErrorKind, FetchAttemptOutcome


def test_count_text_tool():
    payload = asyncio.run(mcp_server.count_text("red green red", filter_stop_words=False))

    assert payload["wordCount"] == 3
    assert payload["repeatedWordsAnalysis"]["mostRepeatedWord"]["word"] == "red"
    assert payload["repeatedWordsAnalysis"]["stopWordsFiltered"] is False


def test_count_text_tool_blank():
    assert asyncio.run(mcp_server.count_text("   ")) is None


def test_count_document_tool(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("alpha beta alpha", encoding="utf-8")

    payload = asyncio.run(mcp_server.count_document(str(path)))

    assert payload["wordCount"] == 3


def test_count_document_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        asyncio.run(mcp_server.count_document(str(tmp_path / "nope.pdf")))


def test_count_document_error_message(tmp_path):
    path = tmp_path / "picture.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n")

    with pytest.raises(RuntimeError, match="PDF, DOCX, TXT, MD, or SRT"):
        asyncio.run(mcp_server.count_document(str(path)))


def test_count_webpage_invalid_url():
    with pytest.raises(RuntimeError, match="valid URL"):
        asyncio.run(mcp_server.count_webpage("not a url"))


@pytest.mark.parametrize(
    "attempt, expected",
    [
        (FetchAttemptOutcome("direct", False, error_kind=ErrorKind.HTTP_STATUS, status_code=404), "404 error"),
        (FetchAttemptOutcome("direct", False, error_kind=ErrorKind.HTTP_STATUS, status_code=403), "forbidden"),
        (FetchAttemptOutcome("direct", False, error_kind=ErrorKind.TIMEOUT), "timed out"),
        (FetchAttemptOutcome("direct", False, error_kind=ErrorKind.NETWORK), "internet connection"),
    ],
)
def test_count_webpage_reports_specific_cause(monkeypatch, attempt, expected):
    def failing(url, **kwargs):
        raise AllTransportsFailedError(url, [attempt])

    monkeypatch.setattr(mcp_server, "analyze_url", failing)

    with pytest.raises(RuntimeError) as excinfo:
        asyncio.run(mcp_server.count_webpage("https://example.com/"))

    message = str(excinfo.value)
    assert expected in message
    assert message.index(expected) < message.index("All proxy services failed")
