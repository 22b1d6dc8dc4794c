"""
DTOs (Data Transfer Objects) used by the document extraction use cases and API.

Following clean architecture principles:
- DTOs are organized by feature/domain
- Each DTO is in its own file for better organization
"""

# Extraction DTOs
from .extract_document_request_dto import ExtractDocumentRequestDTO
from .page_result_dto import PageResultDTO
from .progress_event_dto import ProgressEventDTO
from .extract_document_response_dto import ExtractDocumentResponseDTO

__all__ = [
    "ExtractDocumentRequestDTO",
    "PageResultDTO",
    "ProgressEventDTO",
    "ExtractDocumentResponseDTO",
]
