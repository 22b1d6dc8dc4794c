"""
Domain interfaces (ports) for the document extraction feature.

Following clean architecture principles:
- Domain defines interfaces (ports)
- Infrastructure implements interfaces (adapters)
- Application orchestrates via interfaces

Each interface is defined in its own file for better organization.
"""

from .iimage_decoder import IImageDecoder
from .iocr_engine import IOcrEngine
from .ipdf_renderer import IPdfDocument, IPdfRenderer

__all__ = ["IImageDecoder", "IOcrEngine", "IPdfDocument", "IPdfRenderer"]
