"""
Extraction pipeline: embedded text first, OCR fallback per page.

Processing Flow:
  1. Classify the upload (PDF / image); anything else is rejected up front
  2. Image: decode into a bitmap and OCR it as a single page
  3. PDF: for each page, in order:
       - read the embedded text layer
       - keep it if its trimmed length is > native_text_min_chars
       - otherwise render the page (render_scale) and OCR the bitmap
  4. Join page blocks with a blank line, trim, report 100%

Pages are processed strictly one after another: one bitmap is alive at a time and
the OCR engine is never called concurrently. Blocking collaborator calls are run
with asyncio.to_thread so the caller's event loop stays responsive.

Any collaborator failure aborts the run with EngineFailureError; text collected
from earlier pages is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from features.extraction.application.progress import ProgressCallback, ProgressReporter
from features.extraction.domain.entities import (
    Document,
    ExtractionDecision,
    ExtractionResult,
    Page,
    PageResult,
    PipelineState,
    SourceKind,
)
from features.extraction.domain.errors import (
    EngineFailureError,
    ExtractionInProgressError,
    ExtractionStage,
    UnsupportedFormatError,
)
from features.extraction.domain.interfaces import (
    IImageDecoder,
    IOcrEngine,
    IPdfDocument,
    IPdfRenderer,
)
from features.extraction.domain.policy import (
    DEFAULT_OCR_LANGUAGE,
    DEFAULT_RENDER_SCALE,
    NATIVE_TEXT_MIN_CHARS,
    classify_source,
    decide_extraction,
    running_percent,
)

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


@dataclass
class ExtractionPipeline:
    """
    Orchestrates PageSource -> NativeTextProbe -> (Rasterizer -> OcrEngine).

    Only one run may be in flight per pipeline; a second call to extract()
    while one is running raises ExtractionInProgressError.
    """

    renderer: IPdfRenderer
    ocr_engine: IOcrEngine
    image_decoder: IImageDecoder
    native_text_min_chars: int = NATIVE_TEXT_MIN_CHARS
    render_scale: float = DEFAULT_RENDER_SCALE
    ocr_language: str = DEFAULT_OCR_LANGUAGE
    state: PipelineState = field(default=PipelineState.IDLE, init=False)
    _in_flight: bool = field(default=False, init=False, repr=False)

    @property
    def is_running(self) -> bool:
        return self._in_flight

    async def extract(
        self,
        data: bytes,
        mime_hint: Optional[str],
        filename: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult:
        """
        Extract plain text from a PDF or image.

        Args:
            data: Raw file bytes
            mime_hint: MIME type, filename or extension of the upload
            filename: Optional original filename (second hint)
            on_progress: Observer called with every ProgressState

        Returns:
            ExtractionResult (its text may be empty: that is not an error)

        Raises:
            UnsupportedFormatError: input is neither a PDF nor an image
            ExtractionInProgressError: another run is in flight
            EngineFailureError: loader, renderer or OCR failed on some page
        """
        source_kind = classify_source(mime_hint, filename)
        if source_kind is None:
            raise UnsupportedFormatError(mime_hint or filename)

        if self._in_flight:
            raise ExtractionInProgressError()

        self._in_flight = True
        reporter = ProgressReporter(on_progress)
        try:
            self._transition(PipelineState.IDLE)
            reporter.emit(0, 0, 0, "Starting extraction...", self.state)

            try:
                if source_kind is SourceKind.IMAGE:
                    document, blocks = await self._extract_image(data, reporter)
                else:
                    document, blocks = await self._extract_pdf(data, reporter)
            except EngineFailureError as e:
                self._transition(PipelineState.FAILED)
                reporter.fail()
                logger.error(
                    "Extraction aborted (stage=%s, page=%d): %s",
                    e.stage.value,
                    e.page_index,
                    e.cause,
                )
                raise

            text = PAGE_SEPARATOR.join(block.text for block in blocks).strip()
            if not text:
                logger.warning("Extraction produced empty text - file may be encrypted or unreadable")

            self._transition(PipelineState.DONE)
            total = document.page_count
            reporter.emit(total, total, 100, "Extraction finished", self.state)

            return ExtractionResult(
                text=text,
                source_kind=source_kind,
                page_count=document.page_count,
                pages=tuple(blocks),
                progress=reporter.history,
            )
        finally:
            self._in_flight = False

    async def _extract_image(self, data: bytes, reporter: ProgressReporter):
        document = Document(source_kind=SourceKind.IMAGE, page_count=1)

        self._transition(PipelineState.OPENING_DOCUMENT)
        reporter.emit(0, 1, 0, "Loading image...", self.state)
        page = Page(index=1)
        page.raster_bitmap = await self._call(ExtractionStage.OPEN, 1, self.image_decoder.decode, data)

        self._transition(PipelineState.OCR_RUNNING)
        reporter.emit(1, 1, running_percent(1, 1), "Image uploaded - running OCR...", self.state)
        text = await self._recognize(page)

        logger.info("Image: OCR result length=%d", len(text))
        return document, [PageResult(index=1, decision=ExtractionDecision.OCR_REQUIRED, text=text)]

    async def _extract_pdf(self, data: bytes, reporter: ProgressReporter):
        self._transition(PipelineState.OPENING_DOCUMENT)
        reporter.emit(0, 0, 0, "Loading PDF...", self.state)
        pdf: IPdfDocument = await self._call(ExtractionStage.OPEN, 0, self.renderer.open_document, data)

        try:
            document = Document(source_kind=SourceKind.PDF, page_count=pdf.page_count)
            total = document.page_count
            reporter.emit(0, total, 0, f"Loaded PDF with {total} pages", self.state)

            blocks: List[PageResult] = []
            for index in range(1, total + 1):
                blocks.append(await self._process_page(pdf, index, total, reporter))
            return document, blocks
        finally:
            pdf.close()

    async def _process_page(
        self,
        pdf: IPdfDocument,
        index: int,
        total: int,
        reporter: ProgressReporter,
    ) -> PageResult:
        percent = running_percent(index, total)
        self._transition(PipelineState.PROCESSING_PAGE)
        reporter.emit(index, total, percent, f"Processing page {index} / {total}...", self.state)

        handle = await self._call(ExtractionStage.OPEN, index, pdf.get_page, index)
        native_text = await self._call(ExtractionStage.NATIVE_TEXT, index, pdf.get_native_text, handle)
        page = Page(index=index, native_text=native_text or "")

        decision = decide_extraction(page.native_text, self.native_text_min_chars)
        if decision is ExtractionDecision.NATIVE_TEXT:
            text = page.native_text.strip()
            logger.info("Page %d: extracted text (len=%d)", index, len(text))
            return PageResult(index=index, decision=decision, text=text)

        logger.info("Page %d: no text found, rendering page and running OCR...", index)
        self._transition(PipelineState.OCR_RUNNING)
        reporter.emit(index, total, percent, f"Page {index}: running OCR (this can take some seconds)...", self.state)

        page.raster_bitmap = await self._call(
            ExtractionStage.RENDER, index, pdf.render_to_bitmap, handle, self.render_scale
        )
        text = await self._recognize(page)
        logger.info("Page %d: OCR result length=%d", index, len(text))
        return PageResult(index=index, decision=decision, text=text)

    async def _recognize(self, page: Page) -> str:
        text = await self._call(
            ExtractionStage.OCR, page.index, self.ocr_engine.recognize, page.raster_bitmap, self.ocr_language
        )
        page.raster_bitmap = None
        return (text or "").strip()

    async def _call(self, stage: ExtractionStage, page_index: int, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking collaborator call off the event loop, mapping failures to EngineFailureError."""
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            raise EngineFailureError(stage, page_index, e) from e

    def _transition(self, state: PipelineState) -> None:
        if state is not self.state:
            logger.debug("Pipeline state: %s -> %s", self.state.value, state.value)
        self.state = state
