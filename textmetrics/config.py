"""Configuration objects and constants for text extraction and counting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_OCR_LANGUAGE = "eng"
SUPPORTED_OCR_LANGUAGES = (
    "eng",
    "spa",
    "fra",
    "deu",
    "ita",
    "por",
    "rus",
    "chi_sim",
    "jpn",
    "kor",
)
RELAY_URL_ENV = "TEXTMETRICS_RELAY_URL"

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}
PROXY_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}


@dataclass
class FetchConfig:
    """Settings that control the webpage transport chain."""

    relay_endpoint: Optional[str] = None
    relay_timeout: float = 15.0
    direct_timeout: float = 10.0
    proxy_timeout: float = 20.0
    min_html_chars: int = 50


@dataclass
class DocumentConfig:
    """Settings controlling document extraction and the OCR fallback."""

    ocr_language: str = DEFAULT_OCR_LANGUAGE
    ocr_scale: float = 2.0
    min_text_chars: int = 50


@dataclass
class AnalysisConfig:
    filter_stop_words: bool = True
    top_words_limit: int = 15
