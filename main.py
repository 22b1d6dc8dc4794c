"""
Entry point for the FastAPI application.

Run with (from project root):

    uvicorn main:app --reload

Exposes:

    POST /api/v1/documents/extract            (PDF / image -> text + analysis)
    POST /api/v1/documents/extract/stream     (same, NDJSON progress stream)
    POST /api/v1/documents/extract/download   (same, .txt attachment)
    POST /api/v1/text/analyze                 (re-analyze edited text)
"""

import logging
import sys

from fastapi import FastAPI

from features.analysis.presentation.api import router as analysis_router
from features.extraction.presentation.api import router as extraction_router
from settings import get_settings

settings = get_settings()

handlers = [logging.StreamHandler(sys.stdout)]
if settings.log_file:
    handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers,
)

# Set specific log levels for modules
logging.getLogger("features.extraction.application.extraction_pipeline").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)
logger.info("Starting %s", settings.app_name)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.include_router(extraction_router)
app.include_router(analysis_router)


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}
