"""
Lexicon-based Sentiment Scoring

Scores free text by summing word valences from a sentiment lexicon and
maps the signed total onto positive / negative / neutral. The default
lexicon is AFINN-165, whose integer valences run from -5 to 5. A word
directly after a negator ("not good") counts with its sign flipped.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import FrozenSet, List, Mapping, Optional

from .preprocess import TextPreprocessor

logger = logging.getLogger(__name__)

# Scores strictly above / below these bounds leave the neutral dead-zone
POSITIVE_THRESHOLD = 2.0
NEGATIVE_THRESHOLD = -2.0

NEGATORS: FrozenSet[str] = frozenset(
    {
        "cant",
        "dont",
        "doesnt",
        "not",
        "non",
        "wont",
        "isnt",
    }
)

# Contractions are joined ("don't" -> "dont") before tokenizing
APOSTROPHE_PATTERN = re.compile(r"['’]")


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Sentiment":
        """Unknown or missing labels default to neutral."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.NEUTRAL


@dataclass(frozen=True)
class SentimentScore:
    """Result of scoring a single text."""

    sentiment: Sentiment
    score: float


@lru_cache(maxsize=1)
def load_default_lexicon() -> Mapping[str, float]:
    """Load the AFINN-165 word valences once per process."""
    from afinn import Afinn

    lexicon = Afinn(language="en")._dict
    logger.debug(f"Loaded sentiment lexicon with {len(lexicon)} entries")
    return dict(lexicon)


def label_for_score(score: float) -> Sentiment:
    """Classify a signed lexicon score."""
    if score > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


class SentimentScorer:
    """Sums lexicon valences over normalized tokens, honouring negation."""

    def __init__(
        self,
        lexicon: Optional[Mapping[str, float]] = None,
        preprocessor: Optional[TextPreprocessor] = None,
        negators: Optional[FrozenSet[str]] = None,
    ):
        """
        Args:
            lexicon: Word -> valence mapping; AFINN-165 when omitted
            preprocessor: Tokenizer shared with the other enrichment steps
            negators: Words that flip the valence of the next token
        """
        self.lexicon = lexicon if lexicon is not None else load_default_lexicon()
        self.preprocessor = preprocessor or TextPreprocessor()
        self.negators = negators if negators is not None else NEGATORS

    def tokens(self, text: str) -> List[str]:
        return self.preprocessor.tokenize(APOSTROPHE_PATTERN.sub("", text or ""))

    def score(self, text: str) -> SentimentScore:
        total = 0.0
        previous = None
        for token in self.tokens(text):
            valence = self.lexicon.get(token, 0.0)
            if valence and previous in self.negators:
                valence = -valence
            total += valence
            previous = token

        total = round(float(total), 4)
        return SentimentScore(sentiment=label_for_score(total), score=total)
