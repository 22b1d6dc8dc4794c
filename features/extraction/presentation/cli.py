"""
Command-line entry point: extract text from a PDF or image into a .txt file.

Usage:
    content-analyzer scan.pdf                 # writes scan.txt
    content-analyzer photo.jpg -o out.txt --analyze
    python -m features.extraction.presentation.cli report.pdf --backend pymupdf
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import os
import sys
from typing import List, Optional

from features.analysis.application.dtos import AnalyzeTextRequestDTO
from features.analysis.application.use_cases import AnalyzeTextUseCase
from features.extraction.application.use_cases import text_download_filename
from features.extraction.domain.entities import ProgressState
from features.extraction.domain.errors import ExtractionError
from features.extraction.presentation.dependencies import build_extraction_pipeline
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-analyzer",
        description="Extract text from a PDF or image (embedded text, OCR fallback) and analyze it.",
    )
    parser.add_argument("input", type=str, help="Path to a PDF or image file.")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Where to write the extracted text (default: <input name>.txt).",
    )
    parser.add_argument("--analyze", action="store_true", help="Print hashtags / top words / suggestions as JSON.")
    parser.add_argument("--backend", choices=["pdfplumber", "pymupdf"], default=None, help="PDF backend.")
    parser.add_argument("--scale", type=_positive_float, default=None, help="Render scale for OCR pages (default 2.0).")
    parser.add_argument("--lang", type=str, default=None, help="Tesseract language, e.g. eng or eng+deu.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def _log_progress(event: ProgressState) -> None:
    if event.total_pages:
        logger.info("[%3d%%] page %d/%d - %s", event.percent_complete, event.current_page, event.total_pages, event.status_message)
    else:
        logger.info("[%3d%%] %s", event.percent_complete, event.status_message)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if not os.path.exists(args.input):
        raise SystemExit(f"File not found: {args.input}")

    overrides = {}
    if args.backend:
        overrides["pdf_backend"] = args.backend
    if args.scale is not None:
        overrides["render_scale"] = args.scale
    if args.lang:
        overrides["ocr_language"] = args.lang
    settings = Settings.model_validate({**get_settings().model_dump(), **overrides})

    pipeline = build_extraction_pipeline(settings)
    mime_type, _ = mimetypes.guess_type(args.input)
    with open(args.input, "rb") as f:
        data = f.read()

    try:
        result = asyncio.run(
            pipeline.extract(data, mime_type, filename=os.path.basename(args.input), on_progress=_log_progress)
        )
    except ExtractionError as e:
        logger.error("Extraction failed: %s", e)
        return 1

    output_path = args.output or os.path.join(
        os.path.dirname(args.input), text_download_filename(os.path.basename(args.input))
    )
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result.text)

    if result.is_empty:
        logger.warning("No text could be recovered from %s", args.input)
    logger.info("Extracted text saved to: %s", output_path)

    if args.analyze:
        analysis = AnalyzeTextUseCase().execute(AnalyzeTextRequestDTO(text=result.text))
        print(
            json.dumps(
                {
                    "hashtags": analysis.hashtags,
                    "topWords": analysis.top_words,
                    "suggestions": analysis.suggestions,
                },
                ensure_ascii=False,
                indent=2,
            )
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
