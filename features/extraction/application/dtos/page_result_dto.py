"""
DTO describing how a single page was extracted.
"""

from dataclasses import dataclass


@dataclass
class PageResultDTO:
    index: int  # 1-based
    decision: str  # "native_text" | "ocr_required"
    chars: int
