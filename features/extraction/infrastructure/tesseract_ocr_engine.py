"""
Tesseract OCR adapter (pytesseract).

Implements IOcrEngine. One call per bitmap, no retries: any Tesseract error
propagates to the pipeline, which aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pytesseract
from PIL import Image

from features.extraction.domain.interfaces import IOcrEngine
from features.extraction.domain.policy import DEFAULT_OCR_LANGUAGE
from features.extraction.infrastructure.utils.ocr_utils import preprocess_for_ocr, tesseract_config

logger = logging.getLogger(__name__)


@dataclass
class TesseractOcrEngine(IOcrEngine):
    """
    OCR with the Tesseract binary through pytesseract.

    Attributes:
        oem: OCR engine mode (1 = LSTM)
        psm: Page segmentation mode (3 = automatic)
        preprocess: Binarize/denoise the bitmap with OpenCV before recognition
        tesseract_cmd: Path to the tesseract executable when it is not on PATH
    """

    oem: int = 1
    psm: int = 3
    preprocess: bool = False
    tesseract_cmd: Optional[str] = None

    def __post_init__(self):
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

    def recognize(self, bitmap: Image.Image, language: str = DEFAULT_OCR_LANGUAGE) -> str:
        image = preprocess_for_ocr(bitmap) if self.preprocess else bitmap
        logger.debug(
            "Running Tesseract (lang=%s, size=%dx%d, preprocess=%s)",
            language,
            image.width,
            image.height,
            self.preprocess,
        )
        text = pytesseract.image_to_string(image, lang=language, config=tesseract_config(self.oem, self.psm))
        return text or ""
