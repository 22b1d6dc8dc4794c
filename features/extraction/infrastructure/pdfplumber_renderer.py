"""
pdfplumber-backed PDF access: embedded text layer + page rasterization.

This is the default renderer. Rendering goes through pdfplumber's page image
support; ``scale`` is relative to 72 DPI, so 2.0 renders at 144 DPI.
"""

from __future__ import annotations

import io
import logging

import pdfplumber
from PIL import Image

from features.extraction.domain.interfaces import IPdfDocument, IPdfRenderer

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72


class PdfplumberDocument(IPdfDocument):
    def __init__(self, pdf: "pdfplumber.PDF"):
        self._pdf = pdf

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def get_page(self, index: int) -> "pdfplumber.page.Page":
        return self._pdf.pages[index - 1]

    def get_native_text(self, page: "pdfplumber.page.Page") -> str:
        return page.extract_text() or ""

    def render_to_bitmap(self, page: "pdfplumber.page.Page", scale: float) -> Image.Image:
        resolution = POINTS_PER_INCH * scale
        return page.to_image(resolution=resolution).original.convert("RGB")

    def close(self) -> None:
        self._pdf.close()


class PdfplumberRenderer(IPdfRenderer):
    """Opens PDF bytes with pdfplumber."""

    def open_document(self, data: bytes) -> PdfplumberDocument:
        pdf = pdfplumber.open(io.BytesIO(data))
        try:
            logger.debug("Opened PDF with pdfplumber (%d pages)", len(pdf.pages))
        except Exception:
            pdf.close()
            raise
        return PdfplumberDocument(pdf)
