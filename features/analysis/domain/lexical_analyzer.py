"""
Lexical analysis of extracted (or user-edited) text.

Produces:
  - hashtag counts (``#`` followed by ASCII letters, digits or underscore)
  - top keyword counts after stop-word and short-token filtering
  - suggested hashtags built from the top keywords

The whole text is lowercased before any matching, so ``#AI`` and ``#ai`` are the
same tag. Hashtag and keyword passes are independent: a tag's word is also
counted as a keyword.

Ranking is by count descending; ties keep first-encountered order.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from .entities import AnalysisResult


STOP_WORDS = frozenset({"the", "is", "are", "of", "and", "to", "a", "in", "for", "on"})

# Tokens with this many characters or fewer are not keywords.
MIN_KEYWORD_LENGTH = 3

TOP_WORDS_LIMIT = 10

HASHTAG_RE = re.compile(r"#[a-z0-9_]+")
NON_WORD_RE = re.compile(r"[^a-z0-9\s]")
WHITESPACE_RE = re.compile(r"\s+")


def _rank(tokens: Iterable[str]) -> List[Tuple[str, int]]:
    # Counter keeps insertion order and sorted() is stable, so ties stay in
    # first-encountered order.
    counts = Counter(tokens)
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def extract_hashtags(text: str) -> List[Tuple[str, int]]:
    """Count hashtags in already-lowercased text."""
    return _rank(HASHTAG_RE.findall(text))


def extract_keywords(text: str, limit: int = TOP_WORDS_LIMIT) -> List[Tuple[str, int]]:
    """Count keywords in already-lowercased text and keep the top ``limit``."""
    cleaned = NON_WORD_RE.sub(" ", text)
    words = [
        w
        for w in WHITESPACE_RE.split(cleaned)
        if w and w not in STOP_WORDS and len(w) > MIN_KEYWORD_LENGTH
    ]
    return _rank(words)[:limit]


def analyze_text(raw: Optional[str]) -> AnalysisResult:
    """
    Analyze text into hashtags, top words and suggested hashtags.

    Total and pure: ``None``, empty or whitespace-only input yields an empty result.
    """
    if not raw or not raw.strip():
        return AnalysisResult()

    text = raw.lower()

    hashtags = extract_hashtags(text)
    top_words = extract_keywords(text)
    suggestions = [f"#{word}" for word, _ in top_words]

    return AnalysisResult(
        hashtags=tuple(hashtags),
        top_words=tuple(top_words),
        suggestions=tuple(suggestions),
    )
