"""
Text Preprocessing Utilities for Mention Enrichment

Provides the text normalization shared by the sentiment scorer,
keyword extractor and categorizer.
"""

import re
from typing import List


class TextPreprocessor:
    """Text normalization pipeline for mention titles and bodies."""

    def __init__(self):
        # Compile regex patterns for efficiency
        self.punctuation_pattern = re.compile(r"[^\w\s]")
        self.extra_whitespace_pattern = re.compile(r"\s+")

    def clean_text(self, text: str) -> str:
        """
        Lowercase the text and replace punctuation with whitespace.

        Args:
            text: Raw text to clean

        Returns:
            Cleaned and normalized text
        """
        if not text or not text.strip():
            return ""

        text = text.lower()
        text = self.remove_punctuation(text)
        text = self.normalize_whitespace(text)
        return text.strip()

    def tokenize(self, text: str) -> List[str]:
        """Split cleaned text into word tokens."""
        cleaned = self.clean_text(text)
        return cleaned.split() if cleaned else []

    def remove_punctuation(self, text: str) -> str:
        """Remove punctuation while preserving spaces and word characters."""
        return self.punctuation_pattern.sub(" ", text)

    def normalize_whitespace(self, text: str) -> str:
        """Normalize multiple whitespace characters to single spaces."""
        return self.extra_whitespace_pattern.sub(" ", text)


_default_preprocessor = TextPreprocessor()


# Convenience functions for quick preprocessing
def clean_text(text: str) -> str:
    return _default_preprocessor.clean_text(text)


def tokenize(text: str) -> List[str]:
    return _default_preprocessor.tokenize(text)
