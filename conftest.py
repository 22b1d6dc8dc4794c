"""
Shared pytest fixtures.

Collaborators of the extraction pipeline (PDF renderer, OCR engine, image
decoder) are replaced by in-memory fakes so tests need neither Tesseract nor
real documents. Real PDFs for adapter tests are generated with PyMuPDF.
"""

import io
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from PIL import Image

# Keep test runs from writing a log file into the working directory
os.environ.setdefault("CONTENT_ANALYZER_LOG_FILE", "")

from features.extraction.application.extraction_pipeline import ExtractionPipeline
from features.extraction.domain.interfaces import (
    IImageDecoder,
    IOcrEngine,
    IPdfDocument,
    IPdfRenderer,
)


class FakePdfDocument(IPdfDocument):
    def __init__(self, pages: List[str], calls: List[tuple], fail_render_on: Optional[int] = None):
        self._pages = pages
        self._calls = calls
        self._fail_render_on = fail_render_on
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def get_page(self, index: int) -> int:
        self._calls.append(("get_page", index))
        return index

    def get_native_text(self, page: int) -> str:
        self._calls.append(("native_text", page))
        return self._pages[page - 1]

    def render_to_bitmap(self, page: int, scale: float) -> Image.Image:
        self._calls.append(("render", page, scale))
        if page == self._fail_render_on:
            raise RuntimeError(f"render failed on page {page}")
        bitmap = Image.new("RGB", (int(10 * scale), int(10 * scale)), "white")
        bitmap.info["page"] = page
        return bitmap

    def close(self) -> None:
        self._calls.append(("close",))
        self.closed = True


class FakePdfRenderer(IPdfRenderer):
    def __init__(self, pages: List[str], fail_on_open: bool = False, fail_render_on: Optional[int] = None):
        self.pages = pages
        self.fail_on_open = fail_on_open
        self.fail_render_on = fail_render_on
        self.calls: List[tuple] = []
        self.document: Optional[FakePdfDocument] = None

    def open_document(self, data: bytes) -> FakePdfDocument:
        self.calls.append(("open", data))
        if self.fail_on_open:
            raise ValueError("not a PDF")
        self.document = FakePdfDocument(self.pages, self.calls, self.fail_render_on)
        return self.document


class FakeOcrEngine(IOcrEngine):
    """Returns ``texts[page]`` (or ``default``) for bitmaps rendered by FakePdfDocument."""

    def __init__(self, texts: Optional[Dict[int, Optional[str]]] = None, default: Optional[str] = "ocr text", fail_on: Optional[int] = None):
        self.texts = texts or {}
        self.default = default
        self.fail_on = fail_on
        self.calls: List[tuple] = []

    def recognize(self, bitmap: Image.Image, language: str = "eng") -> Optional[str]:
        page = bitmap.info.get("page", 1)
        self.calls.append((page, language, bitmap.size))
        if page == self.fail_on:
            raise RuntimeError(f"tesseract crashed on page {page}")
        return self.texts.get(page, self.default)


class FakeImageDecoder(IImageDecoder):
    def __init__(self):
        self.calls: List[bytes] = []

    def decode(self, data: bytes) -> Image.Image:
        self.calls.append(data)
        if data == b"corrupt":
            raise OSError("cannot identify image file")
        return Image.new("RGB", (40, 20), "white")


@dataclass
class PipelineFixture:
    pipeline: ExtractionPipeline
    renderer: FakePdfRenderer
    ocr: FakeOcrEngine
    decoder: FakeImageDecoder
    events: list = field(default_factory=list)


@pytest.fixture
def pipeline_factory():
    """Build an ExtractionPipeline around fakes; returns a PipelineFixture."""

    def _make(
        pages: Optional[List[str]] = None,
        ocr_texts: Optional[Dict[int, Optional[str]]] = None,
        ocr_default: Optional[str] = "ocr text",
        fail_ocr_on: Optional[int] = None,
        fail_render_on: Optional[int] = None,
        fail_on_open: bool = False,
        **kwargs,
    ) -> PipelineFixture:
        renderer = FakePdfRenderer(pages or [], fail_on_open=fail_on_open, fail_render_on=fail_render_on)
        ocr = FakeOcrEngine(ocr_texts, default=ocr_default, fail_on=fail_ocr_on)
        decoder = FakeImageDecoder()
        pipeline = ExtractionPipeline(renderer=renderer, ocr_engine=ocr, image_decoder=decoder, **kwargs)
        return PipelineFixture(pipeline=pipeline, renderer=renderer, ocr=ocr, decoder=decoder)

    return _make


@pytest.fixture
def make_pdf():
    """Build a PDF in memory with one page per entry ("" = blank page)."""
    import fitz  # PyMuPDF

    def _make(page_texts: List[str]) -> bytes:
        doc = fitz.open()
        try:
            for text in page_texts:
                page = doc.new_page(width=595, height=842)
                if text:
                    page.insert_text((72, 72), text, fontsize=11)
            return doc.tobytes()
        finally:
            doc.close()

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (64, 32), "white").save(buf, format="PNG")
    return buf.getvalue()
