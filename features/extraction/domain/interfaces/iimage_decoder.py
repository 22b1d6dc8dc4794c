"""
Interface for decoding a single raster image upload into a bitmap.
"""

from abc import ABC, abstractmethod
from typing import Any


class IImageDecoder(ABC):
    """Port for image decoders (e.g. PillowImageDecoder)."""

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Decode raw image bytes into an RGB PIL Image."""
        raise NotImplementedError
