"""
Domain entities for the document extraction feature.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class SourceKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


class ExtractionDecision(str, Enum):
    """Which path a page took."""

    NATIVE_TEXT = "native_text"
    OCR_REQUIRED = "ocr_required"


class PipelineState(str, Enum):
    IDLE = "idle"
    OPENING_DOCUMENT = "opening_document"
    PROCESSING_PAGE = "processing_page"
    OCR_RUNNING = "ocr_running"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Document:
    """An opened source document, owned by a single extraction run."""

    source_kind: SourceKind
    page_count: int


@dataclass
class Page:
    """
    One unit of work inside a run.

    Built and dropped within one loop iteration; never kept after its text
    has been appended.
    """

    index: int  # 1-based
    native_text: Optional[str] = None
    raster_bitmap: Optional[Any] = None  # PIL.Image.Image


@dataclass(frozen=True)
class ProgressState:
    """Progress snapshot emitted to observers."""

    current_page: int
    total_pages: int
    percent_complete: int
    status_message: str
    state: PipelineState = PipelineState.IDLE


@dataclass(frozen=True)
class PageResult:
    """Trimmed text block produced for one page."""

    index: int
    decision: ExtractionDecision
    text: str


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of a successful run.

    ``text`` is the page blocks joined by a blank line and trimmed; empty pages
    contribute an empty block.
    """

    text: str
    source_kind: SourceKind
    page_count: int
    pages: Tuple[PageResult, ...] = ()
    progress: Tuple[ProgressState, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.text
