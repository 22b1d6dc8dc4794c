"""
Extraction policy: which path a document and each of its pages take.

- Source classification: PDF vs. single raster image (anything else is rejected)
- Per-page decision: embedded text is kept only when its trimmed length exceeds
  NATIVE_TEXT_MIN_CHARS, otherwise the page is rendered and OCR'd
- Progress percentage used while pages are being processed
"""

from __future__ import annotations

import math
from typing import Optional

from .entities import ExtractionDecision, SourceKind


# Pages with this many trimmed characters or fewer are treated as scanned.
NATIVE_TEXT_MIN_CHARS = 30

# Render scale for OCR (2x improves recognition at proportional memory/latency cost).
DEFAULT_RENDER_SCALE = 2.0

DEFAULT_OCR_LANGUAGE = "eng"

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSIONS = frozenset({"pdf"})
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "webp", "tif", "tiff"})


def _extension(value: str) -> str:
    """Return the lowercase extension of a filename, or the value itself for bare extensions."""
    value = value.strip().lower()
    if "." in value:
        return value.rsplit(".", 1)[-1]
    return value


def _classify_hint(hint: str) -> Optional[SourceKind]:
    normalized = hint.strip().lower()
    if not normalized:
        return None

    # MIME types first (application/pdf, image/png, ...)
    if normalized == PDF_MIME_TYPE:
        return SourceKind.PDF
    if normalized.startswith("image/"):
        return SourceKind.IMAGE

    ext = _extension(normalized)
    if ext in PDF_EXTENSIONS:
        return SourceKind.PDF
    if ext in IMAGE_EXTENSIONS:
        return SourceKind.IMAGE
    return None


def classify_source(mime_hint: Optional[str], filename: Optional[str] = None) -> Optional[SourceKind]:
    """
    Classify an upload as PDF or image from its MIME type and/or filename.

    PDF wins over image when either hint says PDF (a browser may report a PDF
    with a generic MIME type but a ``.pdf`` name).

    Args:
        mime_hint: MIME type (``application/pdf``, ``image/*``), filename or bare extension
        filename: Optional original filename, consulted when the MIME hint is inconclusive

    Returns:
        SourceKind, or None when the input is unsupported
    """
    kinds = [_classify_hint(h) for h in (mime_hint, filename) if h]
    if SourceKind.PDF in kinds:
        return SourceKind.PDF
    if SourceKind.IMAGE in kinds:
        return SourceKind.IMAGE
    return None


def decide_extraction(native_text: Optional[str], min_chars: int = NATIVE_TEXT_MIN_CHARS) -> ExtractionDecision:
    """Native text is accepted only if its trimmed length exceeds ``min_chars``."""
    length = len((native_text or "").strip())
    if length > min_chars:
        return ExtractionDecision.NATIVE_TEXT
    return ExtractionDecision.OCR_REQUIRED


def running_percent(current_page: int, total_pages: int) -> int:
    """
    Percent complete while ``current_page`` (1-based) is being processed.

    Uses round-half-up so 12.5% reports as 13%.
    """
    if total_pages <= 0 or current_page <= 0:
        return 0
    return int(math.floor((current_page - 1) / total_pages * 100 + 0.5))
