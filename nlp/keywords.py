"""
Frequency-based keyword extraction.
"""

from collections import Counter
from typing import FrozenSet, List, Optional

from .preprocess import TextPreprocessor

MAX_KEYWORDS = 5
MIN_KEYWORD_LENGTH = 4

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would", "should",
        "could", "may", "might", "must", "can", "this", "that", "these", "those",
        "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
        "my", "your", "his", "its", "our", "their", "what", "which", "who",
        "whom", "whose", "where", "when", "why", "how", "all", "each", "every",
        "both", "few", "more", "most", "other", "some", "such", "no", "nor", "not",
        "only", "own", "same", "so", "than", "too", "very", "just", "about", "into",
        "through", "during", "before", "after", "above", "below", "up", "down", "out",
        "off", "over", "under", "again", "further", "then", "once",
    }
)


class KeywordExtractor:
    """Returns the most frequent non-trivial terms of a text."""

    def __init__(
        self,
        stop_words: FrozenSet[str] = STOP_WORDS,
        max_keywords: int = MAX_KEYWORDS,
        min_length: int = MIN_KEYWORD_LENGTH,
        preprocessor: Optional[TextPreprocessor] = None,
    ):
        self.stop_words = frozenset(stop_words)
        self.max_keywords = max_keywords
        self.min_length = min_length
        self.preprocessor = preprocessor or TextPreprocessor()

    def extract(self, text: str) -> List[str]:
        """
        Extract the top keywords from text.

        Tokens shorter than min_length and stop words are dropped. Ties in
        frequency keep the order in which the words were first seen.

        Args:
            text: Text to extract keywords from

        Returns:
            Up to max_keywords distinct words, most frequent first
        """
        words = [
            word
            for word in self.preprocessor.tokenize(text)
            if len(word) >= self.min_length and word not in self.stop_words
        ]

        # Counter.most_common sorts stably, preserving first-seen order on ties
        return [word for word, _ in Counter(words).most_common(self.max_keywords)]
