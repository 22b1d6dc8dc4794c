"""
Application use cases for the document extraction feature.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from features.analysis.application.dtos import AnalyzeTextRequestDTO
from features.analysis.application.use_cases import AnalyzeTextUseCase
from features.extraction.application.extraction_pipeline import ExtractionPipeline
from features.extraction.application.progress import ProgressCallback
from features.extraction.domain.entities import ProgressState
from .dtos import (
    ExtractDocumentRequestDTO,
    ExtractDocumentResponseDTO,
    PageResultDTO,
    ProgressEventDTO,
)


DEFAULT_DOWNLOAD_FILENAME = "extracted.txt"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def text_download_filename(filename: Optional[str]) -> str:
    """
    Name for the ".txt" download of extracted text.

    "scan.final.pdf" -> "scan.final.txt"; no filename -> "extracted.txt".
    """
    if not filename:
        return DEFAULT_DOWNLOAD_FILENAME
    stem = _EXTENSION_RE.sub("", filename.rsplit("/", 1)[-1].rsplit("\\", 1)[-1])
    return f"{stem or 'extracted'}.txt"


def to_progress_event_dto(event: ProgressState) -> ProgressEventDTO:
    return ProgressEventDTO(
        current_page=event.current_page,
        total_pages=event.total_pages,
        percent_complete=event.percent_complete,
        status_message=event.status_message,
        state=event.state.value,
    )


@dataclass
class ExtractDocumentUseCase:
    """
    Extract text from an uploaded PDF or image, then analyze it.

    Pipeline:
    1. ExtractionPipeline: embedded text per page, OCR fallback for scanned pages
    2. AnalyzeTextUseCase: hashtags, top words, suggested hashtags

    Extraction errors propagate unchanged (UnsupportedFormatError,
    ExtractionInProgressError, EngineFailureError).
    """

    pipeline: ExtractionPipeline
    analyzer: AnalyzeTextUseCase = field(default_factory=AnalyzeTextUseCase)

    async def execute(
        self,
        request: ExtractDocumentRequestDTO,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractDocumentResponseDTO:
        result = await self.pipeline.extract(
            request.data,
            request.mime_hint,
            filename=request.filename,
            on_progress=on_progress,
        )

        analysis = self.analyzer.execute(AnalyzeTextRequestDTO(text=result.text))

        pages: List[PageResultDTO] = [
            PageResultDTO(index=p.index, decision=p.decision.value, chars=len(p.text))
            for p in result.pages
        ]

        return ExtractDocumentResponseDTO(
            text=result.text,
            source_kind=result.source_kind.value,
            page_count=result.page_count,
            pages=pages,
            progress=[to_progress_event_dto(e) for e in result.progress],
            analysis=analysis,
            download_filename=text_download_filename(request.filename),
        )
