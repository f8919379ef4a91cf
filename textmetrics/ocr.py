"""OCR fallback for PDFs without a usable text layer, powered by Tesseract."""

from __future__ import annotations

import logging
import time
from functools import partial
from typing import Callable, Optional

import pypdfium2 as pdfium
import pytesseract
from PIL import Image

from .config import DEFAULT_OCR_LANGUAGE, SUPPORTED_OCR_LANGUAGES
from .errors import OcrError

logger = logging.getLogger("textmetrics.ocr")

ProgressCallback = Callable[[float], None]

DEFAULT_RENDER_SCALE = 2.0
# Share of the progress range spent on pages; the rest covers teardown.
PAGE_PROGRESS_SHARE = 80.0


class TesseractEngine:
    """Recognition engine bound to one language for the length of one OCR run.

    Use it as a context manager so the engine is released on every exit path.
    """

    def __init__(self, language: str = DEFAULT_OCR_LANGUAGE) -> None:
        self.language = language
        # Called with the completed fraction (0.0 to 1.0) of the current image.
        self.on_progress: Optional[ProgressCallback] = None
        self._started = False

    def start(self) -> None:
        if self.language not in SUPPORTED_OCR_LANGUAGES:
            raise OcrError(
                f"Unsupported OCR language: {self.language}",
                {"language": self.language, "supported": list(SUPPORTED_OCR_LANGUAGES)},
            )
        try:
            version = pytesseract.get_tesseract_version()
            installed = pytesseract.get_languages(config="")
        except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError) as exc:
            raise OcrError(f"OCR engine could not be started: {exc}") from exc
        if self.language not in installed:
            raise OcrError(
                f"Tesseract language data for '{self.language}' is not installed",
                {"language": self.language, "installed": sorted(installed)},
            )
        logger.debug("Started Tesseract %s for language %s", version, self.language)
        self._started = True

    def recognize(self, image: Image.Image) -> str:
        if not self._started:
            raise OcrError("OCR engine used before it was started")
        _report(self.on_progress, 0.0)
        text = pytesseract.image_to_string(image, lang=self.language)
        _report(self.on_progress, 1.0)
        return text

    def close(self) -> None:
        if self._started:
            logger.debug("Released Tesseract engine for %s", self.language)
        self._started = False

    def __enter__(self) -> "TesseractEngine":
        try:
            self.start()
        except OcrError:
            self.close()
            raise
        except Exception as exc:  # pylint: disable=broad-except
            self.close()
            raise OcrError(f"OCR processing failed: {exc}") from exc
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


EngineFactory = Callable[[str], TesseractEngine]


def _open_pdf(data: bytes) -> pdfium.PdfDocument:
    return pdfium.PdfDocument(data)


def _render_page(document: pdfium.PdfDocument, index: int, scale: float) -> Image.Image:
    page = document[index]
    try:
        return page.render(scale=scale).to_pil().convert("RGB")
    finally:
        page.close()


def _report(progress: Optional[ProgressCallback], value: float) -> None:
    if progress is not None:
        progress(value)


def _page_progress(progress: ProgressCallback, index: int, total: int, fraction: float) -> None:
    progress((index + fraction) / total * PAGE_PROGRESS_SHARE)


def ocr_extract(
    data: bytes,
    language: str = DEFAULT_OCR_LANGUAGE,
    progress: Optional[ProgressCallback] = None,
    engine_factory: EngineFactory = TesseractEngine,
    scale: float = DEFAULT_RENDER_SCALE,
) -> str:
    """Render each PDF page and run text recognition on it.

    Pages are processed one at a time in ascending order. A page that fails to
    render or recognize is logged and skipped. The returned text may be empty;
    deciding whether that is an error is up to the caller.

    Raises:
        OcrError: If the document cannot be opened or the engine cannot start.
    """
    try:
        document = _open_pdf(data)
    except Exception as exc:  # pylint: disable=broad-except
        raise OcrError(f"OCR processing failed: {exc}") from exc

    try:
        total_pages = len(document)
        logger.info(
            "Running OCR on %d page%s (language=%s)",
            total_pages,
            "s" if total_pages != 1 else "",
            language,
        )
        chunks = []
        failed_pages = 0
        start = time.perf_counter()
        with engine_factory(language) as engine:
            for index in range(total_pages):
                _report(progress, index / total_pages * PAGE_PROGRESS_SHARE)
                if progress is not None:
                    engine.on_progress = partial(_page_progress, progress, index, total_pages)
                page_start = time.perf_counter()
                try:
                    image = _render_page(document, index, scale)
                    text = engine.recognize(image)
                except Exception as exc:  # pylint: disable=broad-except
                    failed_pages += 1
                    logger.warning("OCR failed on page %d: %s", index + 1, exc)
                    continue
                if text and text.strip():
                    chunks.append(text.strip() + "\n\n")
                logger.debug(
                    "OCR page %d processed in %.2fs",
                    index + 1,
                    time.perf_counter() - page_start,
                )
            _report(progress, 100.0)
    finally:
        document.close()

    if failed_pages:
        logger.warning("OCR skipped %d of %d page(s)", failed_pages, total_pages)
    logger.info("OCR finished in %.2fs", time.perf_counter() - start)
    return "".join(chunks).strip()
