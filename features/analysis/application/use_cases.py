"""
Application use cases for the text analysis feature.
"""

from __future__ import annotations

from dataclasses import dataclass

from features.analysis.domain.lexical_analyzer import analyze_text
from .dtos import AnalysisResultDTO, AnalyzeTextRequestDTO


@dataclass
class AnalyzeTextUseCase:
    """
    Lexical summary of a text: hashtags, top keywords, suggested hashtags.

    Safe on arbitrary user-edited strings; has no state between calls.
    """

    def execute(self, request: AnalyzeTextRequestDTO) -> AnalysisResultDTO:
        result = analyze_text(request.text)
        return AnalysisResultDTO(
            hashtags=list(result.hashtags),
            top_words=list(result.top_words),
            suggestions=list(result.suggestions),
        )
