"""MCP server exposing the textmetrics counting tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_OCR_LANGUAGE, AnalysisConfig, DocumentConfig
from .errors import TextMetricsError, describe_error
from .pipeline import analyze_file, analyze_url, count_text as count_text_results

logger = logging.getLogger("textmetrics.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="textmetrics")


@mcp.tool()
async def count_text(text: str, filter_stop_words: bool = True) -> Optional[Dict[str, Any]]:
    """Count words and characters in text and list its most frequent words."""

    results = count_text_results(text, filter_stop_words)
    return results.to_dict() if results is not None else None


@mcp.tool()
async def count_document(
    path: str,
    ocr_language: str = DEFAULT_OCR_LANGUAGE,
    filter_stop_words: bool = True,
) -> Dict[str, Any]:
    """Extract text from a PDF, DOCX, TXT, MD or SRT file and count it."""

    source = Path(path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Document path does not exist: {source}")
    try:
        results = analyze_file(
            source,
            document_config=DocumentConfig(ocr_language=ocr_language),
            analysis_config=AnalysisConfig(filter_stop_words=filter_stop_words),
        )
    except TextMetricsError as exc:
        raise RuntimeError(describe_error(exc)) from exc
    return results.to_dict()


@mcp.tool()
async def count_webpage(url: str, filter_stop_words: bool = True) -> Dict[str, Any]:
    """Fetch a webpage, reduce it to readable text and count it."""

    try:
        results = analyze_url(
            url,
            analysis_config=AnalysisConfig(filter_stop_words=filter_stop_words),
        )
    except TextMetricsError as exc:
        raise RuntimeError(describe_error(exc)) from exc
    return results.to_dict()


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
