"""High-level operations: extract text from a source, then count it."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union

import requests

from .config import AnalysisConfig, DocumentConfig, FetchConfig
from .counter import count
from .crawler import PageFetcher
from .documents import extract_document
from .errors import EmptyContentError, NoTextExtractedError, ReadError
from .frequency import analyze
from .models import CountResults
from .ocr import ProgressCallback

logger = logging.getLogger("textmetrics.pipeline")


def count_text(
    text: str,
    filter_stop_words: Optional[bool] = None,
    config: Optional[AnalysisConfig] = None,
) -> Optional[CountResults]:
    """Count words and characters and analyze word frequency.

    An explicit ``filter_stop_words`` overrides the value in ``config``.
    Returns None when ``text`` is empty or whitespace-only.
    """
    config = config or AnalysisConfig()
    if filter_stop_words is not None:
        config = replace(config, filter_stop_words=filter_stop_words)
    counts = count(text)
    if counts is None:
        return None
    analysis = analyze(text, config.filter_stop_words, limit=config.top_words_limit)
    return CountResults(counts=counts, repeated_words_analysis=analysis)


def extract_file(
    data: bytes,
    mime_type: Optional[str],
    file_name: Optional[str],
    config: Optional[DocumentConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> str:
    """Extract non-empty text from an uploaded file.

    Raises:
        NoTextExtractedError: If the file holds no extractable text.
    """
    text = extract_document(data, mime_type, file_name, config, progress)
    if not text.strip():
        raise NoTextExtractedError(details={"file_name": file_name})
    return text


def analyze_file(
    source: Union[str, Path, bytes],
    mime_type: Optional[str] = None,
    file_name: Optional[str] = None,
    document_config: Optional[DocumentConfig] = None,
    analysis_config: Optional[AnalysisConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> CountResults:
    """Extract text from a file path or raw bytes and count it."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ReadError(f"Could not read {path}: {exc}", {"path": str(path)}) from exc
        file_name = file_name or path.name
    else:
        data = source

    start = time.perf_counter()
    text = extract_file(data, mime_type, file_name, document_config, progress)
    logger.debug("Extracted %d characters in %.2fs", len(text), time.perf_counter() - start)
    results = count_text(text, config=analysis_config)
    if results is None:
        raise NoTextExtractedError(details={"file_name": file_name})
    return results


def analyze_url(
    url: str,
    fetch_config: Optional[FetchConfig] = None,
    analysis_config: Optional[AnalysisConfig] = None,
    session: Optional[requests.Session] = None,
) -> CountResults:
    """Fetch a webpage, reduce it to text and count it."""
    start = time.perf_counter()
    text = PageFetcher(fetch_config, session).fetch_page_text(url)
    logger.debug("Fetched %d characters in %.2fs", len(text), time.perf_counter() - start)
    results = count_text(text, config=analysis_config)
    if results is None:
        raise EmptyContentError(details={"url": url})
    return results
