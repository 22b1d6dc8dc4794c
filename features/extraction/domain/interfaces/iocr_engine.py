"""
Interface for optical character recognition over a bitmap.

The pipeline calls recognize() at most once per page and never concurrently,
so adapters may assume single-caller, non-reentrant use.
"""

from abc import ABC, abstractmethod
from typing import Any


class IOcrEngine(ABC):
    """Port for OCR engines (e.g. TesseractOcrEngine)."""

    @abstractmethod
    def recognize(self, bitmap: Any, language: str = "eng") -> str:
        """
        Recognize text in a bitmap.

        Args:
            bitmap: PIL Image to recognize
            language: Engine language code (Tesseract style, e.g. "eng", "eng+deu")

        Returns:
            Plain text; an empty string (not an error) when nothing was recognized
        """
        raise NotImplementedError
