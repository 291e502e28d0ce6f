"""Keyword extraction from free text.

Splits text on non-word runs, drops short tokens and stopwords, and
deduplicates while keeping first-seen order.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from mentorsearch.config import settings

logger = logging.getLogger(__name__)

# English function words, auxiliaries and search filler ("mentor", "looking", ...)
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would", "shall",
    "should", "can", "could", "may", "might", "must", "that", "which", "who", "whom",
    "whose", "where", "when", "why", "how", "query", "based", "on", "for", "with",
    "look", "need", "want", "search", "find", "seeking", "help", "please", "thanks",
    "thank", "looking", "about", "like", "someone", "people", "person", "mentor",
})

_NON_WORD = re.compile(r"\W+")


class KeywordExtractor:
    """Stopword-filtering keyword extractor.

    Tokens are kept only when they are at least ``min_token_length``
    characters long and not in the stopword list.
    """

    def __init__(
        self,
        stop_words: Iterable[str] | None = None,
        min_token_length: int | None = None,
    ) -> None:
        self.stop_words = frozenset(w.lower() for w in stop_words) if stop_words is not None else STOP_WORDS
        self.min_token_length = min_token_length or settings.keywords.min_token_length

    def filter_tokens(self, text: str) -> list[str]:
        """Split text into lowercase tokens and drop noise words.

        Duplicates are preserved; order follows the input.
        """
        if not text:
            return []

        return [
            token
            for token in _NON_WORD.split(text.lower())
            if len(token) >= self.min_token_length and token not in self.stop_words
        ]

    def extract(self, text: str) -> list[str]:
        """Extract a deduplicated keyword list from text.

        Args:
            text: Raw query or generated text

        Returns:
            Keywords in first-seen order. Empty when the text holds only
            stopwords or short tokens.
        """
        keywords = list(dict.fromkeys(self.filter_tokens(text)))
        logger.debug(f"Extracted {len(keywords)} keywords from text of length {len(text or '')}")
        return keywords


_default_extractor: KeywordExtractor | None = None


def get_extractor() -> KeywordExtractor:
    """Get or create the shared extractor."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = KeywordExtractor()
    return _default_extractor


def extract_keywords(text: str) -> list[str]:
    """Convenience wrapper around the shared extractor."""
    return get_extractor().extract(text)
