"""
FastAPI routes for the document extraction feature.

Feature: upload a PDF or image, get its text (embedded text or OCR per page),
progress events and a lexical analysis back.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import AsyncIterator
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel

from features.analysis.presentation.api import AnalysisResponse, to_analysis_response
from features.extraction.application.dtos import (
    ExtractDocumentRequestDTO,
    ExtractDocumentResponseDTO,
    ProgressEventDTO,
)
from features.extraction.application.extraction_pipeline import ExtractionPipeline
from features.extraction.application.progress import ProgressChannel
from features.extraction.application.use_cases import (
    DEFAULT_DOWNLOAD_FILENAME,
    ExtractDocumentUseCase,
    to_progress_event_dto,
)
from features.extraction.domain.errors import (
    EngineFailureError,
    ExtractionError,
    ExtractionInProgressError,
    UnsupportedFormatError,
)
from features.extraction.domain.policy import classify_source
from features.extraction.presentation.dependencies import get_extraction_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])


class PageResult(BaseModel):
    index: int
    decision: str
    chars: int


class ProgressEvent(BaseModel):
    currentPage: int
    totalPages: int
    percentComplete: int
    statusMessage: str
    state: str


class ExtractDocumentResponse(BaseModel):
    text: str
    empty: bool
    sourceKind: str
    pageCount: int
    pages: list[PageResult]
    progress: list[ProgressEvent]
    analysis: AnalysisResponse
    downloadFilename: str


def build_extract_document_use_case(pipeline: ExtractionPipeline) -> ExtractDocumentUseCase:
    return ExtractDocumentUseCase(pipeline=pipeline)


def _to_progress_event(dto: ProgressEventDTO) -> ProgressEvent:
    return ProgressEvent(
        currentPage=dto.current_page,
        totalPages=dto.total_pages,
        percentComplete=dto.percent_complete,
        statusMessage=dto.status_message,
        state=dto.state,
    )


def _to_response(dto: ExtractDocumentResponseDTO) -> ExtractDocumentResponse:
    return ExtractDocumentResponse(
        text=dto.text,
        empty=dto.empty,
        sourceKind=dto.source_kind,
        pageCount=dto.page_count,
        pages=[PageResult(index=p.index, decision=p.decision, chars=p.chars) for p in dto.pages],
        progress=[_to_progress_event(e) for e in dto.progress],
        analysis=to_analysis_response(dto.analysis),
        downloadFilename=dto.download_filename,
    )


def _http_error(error: ExtractionError) -> HTTPException:
    """Map extraction errors to HTTP errors."""
    if isinstance(error, UnsupportedFormatError):
        return HTTPException(status_code=415, detail="Only PDF or image files are supported")
    if isinstance(error, ExtractionInProgressError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, EngineFailureError):
        return HTTPException(
            status_code=500,
            detail=f"Text extraction failed at stage '{error.stage.value}' on page {error.page_index}",
        )
    return HTTPException(status_code=500, detail=f"Text extraction failed: {error}")


async def _read_upload(file: UploadFile) -> ExtractDocumentRequestDTO:
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return ExtractDocumentRequestDTO(data=data, mime_hint=file.content_type, filename=file.filename)


async def _run_extraction(
    request: ExtractDocumentRequestDTO,
    pipeline: ExtractionPipeline,
) -> ExtractDocumentResponseDTO:
    use_case = build_extract_document_use_case(pipeline)
    try:
        return await use_case.execute(request)
    except ExtractionError as e:
        logger.error("Extraction of %r failed: %s", request.filename, e)
        raise _http_error(e) from e


@router.post("/extract", response_model=ExtractDocumentResponse)
async def extract_document(
    file: UploadFile = File(...),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
) -> ExtractDocumentResponse:
    """
    Extract text from a PDF or image and analyze it.

    Runs:
      - Embedded text per PDF page when it has more than 30 characters
      - Render + Tesseract OCR for the other pages (and for images)
      - Lexical analysis (hashtags, top words, suggestions) of the final text

    An empty ``text`` (``empty: true``) means nothing was recoverable; it is not an error.
    """
    request = await _read_upload(file)
    dto_out = await _run_extraction(request, pipeline)
    return _to_response(dto_out)


_NON_HEADER_SAFE_RE = re.compile(r'[^\x20-\x7e]|["\\]')


def content_disposition(filename: str) -> str:
    """
    RFC 6266 attachment header for ``filename``.

    ``filename=`` carries a printable-ASCII fallback without quotes or
    backslashes; ``filename*=`` carries the exact UTF-8 name.
    """
    fallback = _NON_HEADER_SAFE_RE.sub("", filename).strip()
    if not fallback or fallback.startswith("."):
        fallback = DEFAULT_DOWNLOAD_FILENAME
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.post("/extract/download", response_class=PlainTextResponse)
async def download_extracted_text(
    file: UploadFile = File(...),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
) -> PlainTextResponse:
    """Extract text and return it as a ``.txt`` attachment."""
    request = await _read_upload(file)
    dto_out = await _run_extraction(request, pipeline)
    return PlainTextResponse(
        dto_out.text,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": content_disposition(dto_out.download_filename)},
    )


def _ndjson(payload: dict) -> str:
    return json.dumps(payload, ensure_ascii=False) + "\n"


def _log_stream_outcome(task: "asyncio.Task", filename: str | None) -> None:
    """Retrieve and log the outcome of a streaming extraction task."""
    if task.cancelled():
        logger.warning("Streaming extraction of %r was cancelled", filename)
        return
    error = task.exception()
    if error is not None:
        logger.error("Streaming extraction of %r failed: %s", filename, error)


@router.post("/extract/stream")
async def extract_document_stream(
    file: UploadFile = File(...),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
) -> StreamingResponse:
    """
    Extract text while streaming progress as NDJSON.

    Lines:
        {"event": "progress", ...ProgressEvent}
        ...
        {"event": "result", ...ExtractDocumentResponse}   on success
        {"event": "error", "kind": ..., "detail": ...}     on failure
    """
    request = await _read_upload(file)

    # Reject before streaming starts so clients get a proper status code
    if classify_source(request.mime_hint, request.filename) is None:
        raise _http_error(UnsupportedFormatError(request.mime_hint or request.filename))
    if pipeline.is_running:
        raise _http_error(ExtractionInProgressError())

    use_case = build_extract_document_use_case(pipeline)
    channel = ProgressChannel()

    async def events() -> AsyncIterator[str]:
        async def run() -> ExtractDocumentResponseDTO:
            try:
                return await use_case.execute(request, on_progress=channel.publish)
            finally:
                channel.close()

        task = asyncio.create_task(run())
        # Runs even when the client disconnects and this generator is closed early
        task.add_done_callback(lambda t: _log_stream_outcome(t, request.filename))
        async for event in channel:
            yield _ndjson({"event": "progress", **_to_progress_event(to_progress_event_dto(event)).model_dump()})

        try:
            dto_out = await task
        except ExtractionError as e:
            http_error = _http_error(e)
            yield _ndjson({"event": "error", "kind": e.kind.value, "detail": http_error.detail})
            return

        yield _ndjson({"event": "result", **_to_response(dto_out).model_dump()})

    return StreamingResponse(events(), media_type="application/x-ndjson")
