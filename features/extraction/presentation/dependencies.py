"""
Wiring for the extraction feature: concrete adapters chosen from settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from features.extraction.application.extraction_pipeline import ExtractionPipeline
from features.extraction.domain.interfaces import IPdfRenderer
from features.extraction.infrastructure.pdfplumber_renderer import PdfplumberRenderer
from features.extraction.infrastructure.pillow_image_decoder import PillowImageDecoder
from features.extraction.infrastructure.pymupdf_renderer import PymupdfRenderer
from features.extraction.infrastructure.tesseract_ocr_engine import TesseractOcrEngine
from settings import Settings, get_settings


def build_pdf_renderer(backend: str) -> IPdfRenderer:
    if backend == "pdfplumber":
        return PdfplumberRenderer()
    if backend == "pymupdf":
        return PymupdfRenderer()
    raise ValueError(f"Unknown PDF backend: {backend}")


def build_extraction_pipeline(settings: Optional[Settings] = None) -> ExtractionPipeline:
    """Build the extraction pipeline with Tesseract OCR and the configured PDF backend."""
    settings = settings or get_settings()
    return ExtractionPipeline(
        renderer=build_pdf_renderer(settings.pdf_backend),
        ocr_engine=TesseractOcrEngine(
            oem=settings.ocr_oem,
            psm=settings.ocr_psm,
            preprocess=settings.ocr_preprocess,
            tesseract_cmd=settings.tesseract_cmd,
        ),
        image_decoder=PillowImageDecoder(),
        native_text_min_chars=settings.native_text_min_chars,
        render_scale=settings.render_scale,
        ocr_language=settings.ocr_language,
    )


@lru_cache(maxsize=1)
def get_extraction_pipeline() -> ExtractionPipeline:
    """
    Process-wide pipeline instance.

    Shared so that the single-flight guard applies across requests.
    """
    return build_extraction_pipeline()
