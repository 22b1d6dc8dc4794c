"""
PyMuPDF-backed PDF access: embedded text layer + page rasterization.

Alternative to the pdfplumber renderer (select with ``pdf_backend = "pymupdf"``);
faster rendering, slightly different text-layer whitespace.
"""

from __future__ import annotations

import logging
from io import BytesIO

import fitz  # PyMuPDF
from PIL import Image

from features.extraction.domain.interfaces import IPdfDocument, IPdfRenderer

logger = logging.getLogger(__name__)


class PymupdfDocument(IPdfDocument):
    def __init__(self, doc: "fitz.Document"):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, index: int) -> "fitz.Page":
        return self._doc.load_page(index - 1)

    def get_native_text(self, page: "fitz.Page") -> str:
        return page.get_text("text") or ""

    def render_to_bitmap(self, page: "fitz.Page", scale: float) -> Image.Image:
        matrix = fitz.Matrix(scale, scale)
        pix = page.get_pixmap(matrix=matrix, alpha=False)
        return Image.open(BytesIO(pix.tobytes("png"))).convert("RGB")

    def close(self) -> None:
        self._doc.close()


class PymupdfRenderer(IPdfRenderer):
    """Opens PDF bytes with PyMuPDF."""

    def open_document(self, data: bytes) -> PymupdfDocument:
        doc = fitz.open(stream=data, filetype="pdf")
        logger.debug("Opened PDF with PyMuPDF (%d pages)", doc.page_count)
        return PymupdfDocument(doc)
