"""
Interface for opening PDFs, reading their text layer and rasterizing pages.

Infrastructure adapters (PdfplumberRenderer, PymupdfRenderer) implement these ports.
"""

from abc import ABC, abstractmethod
from typing import Any


class IPdfDocument(ABC):
    """An opened PDF. Closed by the pipeline once the run finishes or fails."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_page(self, index: int) -> Any:
        """
        Return an opaque page handle.

        Args:
            index: 1-based page number
        """
        raise NotImplementedError

    @abstractmethod
    def get_native_text(self, page: Any) -> str:
        """Return the embedded text layer of a page ("" when there is none)."""
        raise NotImplementedError

    @abstractmethod
    def render_to_bitmap(self, page: Any, scale: float) -> Any:
        """
        Render a page to an RGB bitmap.

        Args:
            page: Handle returned by get_page
            scale: Zoom factor relative to 72 DPI (2.0 = 144 DPI)

        Returns:
            PIL Image with width/height in pixels
        """
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError


class IPdfRenderer(ABC):
    """Port for opening PDF bytes."""

    @abstractmethod
    def open_document(self, data: bytes) -> IPdfDocument:
        raise NotImplementedError
