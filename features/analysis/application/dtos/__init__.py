"""
DTOs (Data Transfer Objects) used by the text analysis use cases and API.
"""

from .analyze_text_request_dto import AnalyzeTextRequestDTO
from .analysis_result_dto import AnalysisResultDTO

__all__ = [
    "AnalyzeTextRequestDTO",
    "AnalysisResultDTO",
]
