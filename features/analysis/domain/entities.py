"""
Domain entities for the text analysis feature.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class AnalysisResult:
    """Lexical summary of a text. Recomputed wholesale for every new input."""

    hashtags: Tuple[Tuple[str, int], ...] = ()  # (tag, count), count desc
    top_words: Tuple[Tuple[str, int], ...] = ()  # (word, count), count desc, at most 10
    suggestions: Tuple[str, ...] = ()  # "#" + word for each top word

    @property
    def is_empty(self) -> bool:
        return not (self.hashtags or self.top_words or self.suggestions)
