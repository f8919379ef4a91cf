"""Text extraction for uploaded documents: plain text, PDF and Word files."""

from __future__ import annotations

import io
import logging
import time
from enum import Enum
from pathlib import PurePath
from typing import List, Optional

import docx
import pypdfium2 as pdfium
from docx.table import Table
from filetype import guess

from .config import DocumentConfig
from .errors import ExtractionError, OcrError, ReadError, UnsupportedFileTypeError
from .ocr import ProgressCallback, ocr_extract

logger = logging.getLogger("textmetrics.documents")

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIMES = {"text/plain", "text/markdown", "application/x-subrip"}
TEXT_SUFFIXES = {".md", ".srt"}
GENERIC_MIMES = {"", "application/octet-stream", "binary/octet-stream"}
FALLBACK_SUFFIXES = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".txt": "text",
    ".md": "text",
    ".srt": "text",
}
PDF_FAILURE_MESSAGE = (
    "Failed to extract text from PDF. This may be a scanned document. Please try a "
    "different file or check if the PDF contains readable text."
)
DOCX_FAILURE_MESSAGE = (
    "Failed to extract text from DOCX file. Please make sure the file is a valid "
    "Word document and try again."
)


class DocumentFormat(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"


def _suffix(file_name: Optional[str]) -> str:
    if not file_name:
        return ""
    return PurePath(file_name).suffix.lower()


def detect_format(
    data: bytes,
    mime_type: Optional[str],
    file_name: Optional[str],
) -> DocumentFormat:
    """Pick an extractor from the declared MIME type, the content or the name."""
    mime = (mime_type or "").split(";")[0].strip().lower()
    suffix = _suffix(file_name)

    if mime == PDF_MIME:
        return DocumentFormat.PDF
    if mime == DOCX_MIME:
        return DocumentFormat.DOCX
    if mime in TEXT_MIMES or suffix in TEXT_SUFFIXES:
        return DocumentFormat.TEXT

    if mime in GENERIC_MIMES:
        kind = guess(data) if data else None
        if kind is not None:
            if kind.mime == PDF_MIME:
                return DocumentFormat.PDF
            if kind.mime == DOCX_MIME:
                return DocumentFormat.DOCX
        if suffix in FALLBACK_SUFFIXES:
            return DocumentFormat(FALLBACK_SUFFIXES[suffix])

    raise UnsupportedFileTypeError(file_name, mime_type)


def extract_plain_text(data: bytes) -> str:
    """Decode a text, Markdown or subtitle file."""
    try:
        return data.decode("utf-8-sig").strip()
    except UnicodeDecodeError as exc:
        raise ReadError(details={"reason": str(exc)}) from exc


def _read_text_layer(data: bytes) -> str:
    """Join positioned text runs with spaces and pages with newlines."""
    document = pdfium.PdfDocument(data)
    pages: List[str] = []
    try:
        for page_index in range(len(document)):
            page = document[page_index]
            textpage = page.get_textpage()
            try:
                runs = [
                    textpage.get_text_bounded(*textpage.get_rect(rect_index))
                    for rect_index in range(textpage.count_rects())
                ]
            finally:
                textpage.close()
                page.close()
            pages.append(" ".join(runs))
    finally:
        document.close()
    return "".join(page_text + "\n" for page_text in pages).strip()


def extract_pdf_text(
    data: bytes,
    config: Optional[DocumentConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> str:
    """Extract a PDF's text layer, falling back to OCR for scanned documents.

    OCR runs when the text layer cannot be read or holds fewer than
    ``config.min_text_chars`` characters. The result may be empty if OCR finds
    nothing either.
    """
    config = config or DocumentConfig()
    start = time.perf_counter()
    try:
        text = _read_text_layer(data)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Standard PDF extraction failed (%s); trying OCR fallback", exc)
    else:
        logger.debug("Read PDF text layer in %.2fs", time.perf_counter() - start)
        if len(text) >= config.min_text_chars:
            return text
        logger.info(
            "Little to no text found via standard extraction (%d chars); attempting OCR",
            len(text),
        )

    try:
        return ocr_extract(
            data,
            language=config.ocr_language,
            progress=progress,
            scale=config.ocr_scale,
        )
    except OcrError as exc:
        logger.error("OCR fallback also failed: %s", exc)
        raise ExtractionError(
            PDF_FAILURE_MESSAGE,
            {"reason": str(exc)},
            user_message=PDF_FAILURE_MESSAGE,
        ) from exc


def _iter_docx_paragraphs(document) -> List[str]:
    paragraphs: List[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                for cell in row.cells:
                    paragraphs.extend(paragraph.text for paragraph in cell.paragraphs)
        else:
            paragraphs.append(block.text)
    return paragraphs


def extract_docx_text(data: bytes) -> str:
    """Return the raw text of a Word document."""
    try:
        document = docx.Document(io.BytesIO(data))
        paragraphs = _iter_docx_paragraphs(document)
    except Exception as exc:  # pylint: disable=broad-except
        raise ExtractionError(
            DOCX_FAILURE_MESSAGE,
            {"reason": str(exc)},
            user_message=DOCX_FAILURE_MESSAGE,
        ) from exc
    return "\n\n".join(paragraphs).strip()


def extract_document(
    data: bytes,
    mime_type: Optional[str],
    file_name: Optional[str],
    config: Optional[DocumentConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> str:
    """Dispatch ``data`` to the extractor matching its format."""
    document_format = detect_format(data, mime_type, file_name)
    logger.info(
        "Extracting %s as %s (%d bytes)",
        file_name or "<upload>",
        document_format.value,
        len(data),
    )
    if document_format is DocumentFormat.PDF:
        return extract_pdf_text(data, config, progress)
    if document_format is DocumentFormat.DOCX:
        return extract_docx_text(data)
    return extract_plain_text(data)
