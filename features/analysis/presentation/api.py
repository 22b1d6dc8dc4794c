"""
FastAPI routes for the text analysis feature.

Feature: re-analyse any text (e.g. extracted text after a user edited it).
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from features.analysis.application.dtos import AnalysisResultDTO, AnalyzeTextRequestDTO
from features.analysis.application.use_cases import AnalyzeTextUseCase


router = APIRouter(prefix="/api/v1/text", tags=["analysis"])


class AnalyzeTextRequest(BaseModel):
    text: str | None = None


class TermCount(BaseModel):
    term: str
    count: int


class AnalysisResponse(BaseModel):
    hashtags: list[TermCount]
    topWords: list[TermCount]
    suggestions: list[str]


def build_analyze_text_use_case() -> AnalyzeTextUseCase:
    return AnalyzeTextUseCase()


def to_analysis_response(dto: AnalysisResultDTO) -> AnalysisResponse:
    """Convert an analysis DTO to its API model."""
    return AnalysisResponse(
        hashtags=[TermCount(term=tag, count=count) for tag, count in dto.hashtags],
        topWords=[TermCount(term=word, count=count) for word, count in dto.top_words],
        suggestions=list(dto.suggestions),
    )


@router.post("/analyze", response_model=AnalysisResponse)
def analyze_text(request: AnalyzeTextRequest) -> AnalysisResponse:
    """
    Analyze text into hashtags, top words and suggested hashtags.

    Never fails on content: empty text yields empty lists.
    """
    use_case = build_analyze_text_use_case()
    dto_out = use_case.execute(AnalyzeTextRequestDTO(text=request.text))
    return to_analysis_response(dto_out)
