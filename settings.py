"""
Application settings for the content analyzer.

Values can be overridden with environment variables prefixed with
``CONTENT_ANALYZER_`` (e.g. ``CONTENT_ANALYZER_PDF_BACKEND=pymupdf``) or a local
``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from features.extraction.domain.policy import (
    DEFAULT_OCR_LANGUAGE,
    DEFAULT_RENDER_SCALE,
    NATIVE_TEXT_MIN_CHARS,
)


class Settings(BaseSettings):
    """Runtime configuration."""

    # Application
    app_name: str = "Content Analyzer API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    log_file: Optional[str] = "content_analyzer.log"

    # Extraction
    pdf_backend: Literal["pdfplumber", "pymupdf"] = "pdfplumber"
    render_scale: float = Field(default=DEFAULT_RENDER_SCALE, gt=0)
    native_text_min_chars: int = Field(default=NATIVE_TEXT_MIN_CHARS, ge=0)

    # OCR (Tesseract)
    ocr_language: str = DEFAULT_OCR_LANGUAGE
    ocr_oem: int = 1  # 1 = LSTM only
    ocr_psm: int = 3  # 3 = fully automatic page segmentation
    ocr_preprocess: bool = False
    tesseract_cmd: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
