"""
DTO for a document extraction request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ExtractDocumentRequestDTO:
    """
    Input for the extraction pipeline: raw bytes plus format hints.
    """

    data: bytes
    mime_hint: Optional[str] = None  # "application/pdf", "image/png", ".pdf", ...
    filename: Optional[str] = None
