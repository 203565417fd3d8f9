"""
Keyword-pattern mention categorization.
"""

import re
from enum import Enum
from typing import Optional, Pattern, Sequence, Tuple


class Category(str, Enum):
    COMPLAINT = "complaint"
    REVIEW = "review"
    PRODUCT = "product"
    SUPPORT = "support"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Unknown or missing categories default to general."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.GENERAL


# Evaluated top to bottom; the first group that matches wins.
# Patterns match anywhere in the text, not on word boundaries.
CATEGORY_PATTERNS: Tuple[Tuple[Category, Pattern[str]], ...] = (
    (
        Category.COMPLAINT,
        re.compile(
            r"bad|poor|terrible|awful|horrible|worst|hate|disappointed|complaint|"
            r"issue|problem|broken|defect|faulty|error|bug"
        ),
    ),
    (
        Category.REVIEW,
        re.compile(r"review|rating|stars|recommend|suggest|opinion|thoughts|experience"),
    ),
    (
        Category.PRODUCT,
        re.compile(r"product|feature|launch|release|new|update|version|upgrade|announcement"),
    ),
    (
        Category.SUPPORT,
        re.compile(r"support|help|assistance|customer service|ticket|query|question|contact"),
    ),
)


class Categorizer:
    """Assigns one category from an ordered list of keyword patterns."""

    def __init__(self, patterns: Sequence[Tuple[Category, Pattern[str]]] = CATEGORY_PATTERNS):
        self.patterns = tuple(patterns)

    def categorize(self, text: str) -> Category:
        lower_text = (text or "").lower()
        for category, pattern in self.patterns:
            if pattern.search(lower_text):
                return category
        return Category.GENERAL
