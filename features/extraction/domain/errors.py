"""
Errors raised by the extraction pipeline.

An empty extraction is NOT an error: callers must check for these exceptions,
never for an empty string.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    ENGINE_FAILURE = "engine_failure"
    BUSY = "busy"


class ExtractionStage(str, Enum):
    """Collaborator call that failed."""

    OPEN = "open"
    NATIVE_TEXT = "native_text"
    RENDER = "render"
    OCR = "ocr"


class ExtractionError(Exception):
    """Base class for unrecoverable extraction failures."""

    kind: ErrorKind = ErrorKind.ENGINE_FAILURE


class UnsupportedFormatError(ExtractionError):
    """Input is neither a PDF nor an image; raised before any work starts."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, hint: Optional[str] = None):
        self.hint = hint
        super().__init__(f"Unsupported document type: {hint or 'unknown'}")


class EngineFailureError(ExtractionError):
    """A loader, renderer or OCR call failed; the whole run is aborted."""

    kind = ErrorKind.ENGINE_FAILURE

    def __init__(self, stage: ExtractionStage, page_index: int, cause: Optional[BaseException] = None):
        self.stage = stage
        self.page_index = page_index
        self.cause = cause
        message = f"Extraction failed at stage '{stage.value}' on page {page_index}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ExtractionInProgressError(ExtractionError):
    """Another extraction run is still in flight."""

    kind = ErrorKind.BUSY

    def __init__(self):
        super().__init__("An extraction is already in progress")
