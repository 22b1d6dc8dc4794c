"""
DTO for a progress event emitted during extraction.
"""

from dataclasses import dataclass


@dataclass
class ProgressEventDTO:
    current_page: int
    total_pages: int
    percent_complete: int
    status_message: str
    state: str
