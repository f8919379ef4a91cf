"""Shared fixtures for the textmetrics test suite."""

import ctypes
import io
from typing import Callable, Dict, List, Optional, Union

import docx
import pypdfium2 as pdfium
import pypdfium2.raw as pdfium_c
import pytest
import requests

from textmetrics.config import RELAY_URL_ENV
from textmetrics.ocr import TesseractEngine

LONG_HTML = (
    "<html><head><title>Example</title></head><body>"
    "<nav>Menu</nav><article><p>The quick brown fox jumps over the lazy dog.</p>"
    "<p>Foxes are quick.</p></article><footer>Copyright</footer></body></html>"
)


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, text: str = "", json_data=None, url: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.url = url
        self._json_data = json_data

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


Route = Union[FakeResponse, Exception]


class FakeSession:
    """Session that answers by URL prefix and records every request."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes = routes or {}
        self.calls: List[str] = []
        self.kwargs: List[dict] = []

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append(url)
        self.kwargs.append(kwargs)
        for prefix, outcome in self.routes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"No route for {url}")


class FakeEngine(TesseractEngine):
    """Recognition engine that replays scripted per-page results."""

    def __init__(
        self,
        language: str = "eng",
        script: Optional[Callable[[object], str]] = None,
        fail_start: bool = False,
    ) -> None:
        super().__init__(language)
        self.script = script or (lambda image: "recognized text")
        self.fail_start = fail_start
        self.started = False
        self.closed = False
        self.images: List[object] = []

    def start(self) -> None:
        if self.fail_start:
            raise RuntimeError("engine failed to load")
        self.started = True
        self._started = True

    def recognize(self, image) -> str:
        self.images.append(image)
        return self.script(image)

    def close(self) -> None:
        self.closed = True
        super().close()


@pytest.fixture(autouse=True)
def no_relay_env(monkeypatch):
    monkeypatch.delenv(RELAY_URL_ENV, raising=False)


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """Two-page PDF without any text layer."""
    document = pdfium.PdfDocument.new()
    document.new_page(200, 100)
    document.new_page(200, 100)
    buffer = io.BytesIO()
    document.save(buffer)
    document.close()
    return buffer.getvalue()


@pytest.fixture
def docx_bytes() -> bytes:
    document = docx.Document()
    document.add_paragraph("Quarterly report")
    document.add_paragraph("Revenue grew strongly this quarter.")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "North"
    table.rows[0].cells[1].text = "South"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _add_text_line(document: pdfium.PdfDocument, page: pdfium.PdfPage, text: str, y: float) -> None:
    obj = pdfium_c.FPDFPageObj_NewTextObj(document.raw, b"Helvetica", ctypes.c_float(12))
    buffer = ctypes.create_string_buffer(text.encode("utf-16-le") + b"\x00\x00")
    pdfium_c.FPDFText_SetText(obj, ctypes.cast(buffer, ctypes.POINTER(ctypes.c_ushort)))
    pdfium_c.FPDFPageObj_Transform(obj, 1, 0, 0, 1, 20, y)
    pdfium_c.FPDFPage_InsertObject(page.raw, obj)


@pytest.fixture
def text_pdf_bytes() -> bytes:
    """Two-page PDF: two text lines on the first page, one on the second."""
    document = pdfium.PdfDocument.new()
    for lines in (["Alpha beta gamma", "delta epsilon"], ["Second page words"]):
        page = document.new_page(400, 200)
        for offset, line in enumerate(lines):
            _add_text_line(document, page, line, 150 - offset * 50)
        pdfium_c.FPDFPage_GenerateContent(page.raw)
        page.close()
    buffer = io.BytesIO()
    document.save(buffer)
    document.close()
    return buffer.getvalue()
