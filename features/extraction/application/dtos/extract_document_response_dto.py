"""
DTO for a document extraction response.
"""

from dataclasses import dataclass, field
from typing import List

from features.analysis.application.dtos import AnalysisResultDTO

from .page_result_dto import PageResultDTO
from .progress_event_dto import ProgressEventDTO


@dataclass
class ExtractDocumentResponseDTO:
    """
    Output of extraction + analysis.

    An empty ``text`` means no text was recoverable; failures are raised, not returned.
    """

    text: str
    source_kind: str  # "pdf" | "image"
    page_count: int
    pages: List[PageResultDTO]
    progress: List[ProgressEventDTO]
    analysis: AnalysisResultDTO
    download_filename: str = "extracted.txt"
    empty: bool = field(init=False)

    def __post_init__(self):
        self.empty = not self.text
