"""
DTO for a text analysis request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnalyzeTextRequestDTO:
    """
    Input for lexical analysis.

    The text may come straight from extraction or be edited by a user.
    """

    text: Optional[str] = None
