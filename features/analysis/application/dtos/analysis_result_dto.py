"""
DTO for a lexical analysis result.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class AnalysisResultDTO:
    """Hashtags, top words and suggested hashtags, each ranked by count."""

    hashtags: List[Tuple[str, int]] = field(default_factory=list)
    top_words: List[Tuple[str, int]] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
