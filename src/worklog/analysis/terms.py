"""Tokenization and key-term ranking for work item text."""

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from ..models import WorkItem

# Common English function words plus a few filler words that show up in
# commit subjects and session prompts.
DEFAULT_STOP_WORDS = frozenset({
    "a", "about", "after", "all", "also", "am", "an", "and", "any", "are", "as",
    "at", "be", "been", "before", "being", "but", "by", "can", "could", "did",
    "do", "does", "doing", "done", "each", "for", "from", "had", "has", "have",
    "having", "he", "her", "here", "him", "his", "how", "if", "in", "into",
    "is", "it", "its", "just", "me", "more", "most", "my", "no", "not", "now",
    "of", "off", "on", "once", "only", "or", "other", "our", "out", "over",
    "own", "same", "she", "should", "so", "some", "such", "than", "that",
    "the", "their", "them", "then", "there", "these", "they", "this", "those",
    "through", "too", "under", "until", "up", "us", "very", "was", "we",
    "were", "what", "when", "where", "which", "while", "who", "why", "will",
    "with", "would", "you", "your",
})

# Any non-letter, non-digit in any script. Underscore is a separator too.
_NON_ALNUM_RE = re.compile(r"[\W_]+")


@dataclass(frozen=True)
class TokenizerConfig:
    """Immutable tokenization settings shared by every analysis call."""
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS
    min_length: int = 2

    def with_extra_stop_words(self, words: Iterable[str]) -> "TokenizerConfig":
        """Return a copy that also drops ``words``."""
        extra = {w.strip().lower() for w in words if w and w.strip()}
        return TokenizerConfig(stop_words=self.stop_words | extra, min_length=self.min_length)

    def is_term(self, token: str) -> bool:
        return len(token) >= self.min_length and token not in self.stop_words


DEFAULT_TOKENIZER = TokenizerConfig()


def item_text(item: WorkItem) -> str:
    """Title and description joined into one string."""
    if item.description:
        return f"{item.title} {item.description}"
    return item.title


def normalize_text(text: str) -> list[str]:
    """NFC-normalize, lowercase, turn non-alphanumerics into whitespace, split.

    Letters and digits of every script survive, so accented and non-Latin
    titles tokenize like ASCII ones.
    """
    text = unicodedata.normalize("NFC", text).lower()
    return _NON_ALNUM_RE.sub(" ", text).split()


def tokenize(item: WorkItem, tokenizer: TokenizerConfig = DEFAULT_TOKENIZER) -> Counter:
    """Term frequencies for one item, stop words removed."""
    return Counter(t for t in normalize_text(item_text(item)) if tokenizer.is_term(t))


def extract_key_terms(
    items: list[WorkItem],
    top_n: int = 10,
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
) -> list[str]:
    """Rank terms across all items by frequency.

    Ties keep the order in which terms were first seen. Returns at most
    ``top_n`` terms.
    """
    if not items or top_n <= 0:
        return []

    counts: Counter = Counter()
    for item in items:
        counts.update(tokenize(item, tokenizer))

    # Counter keeps insertion order and sorted() is stable, so first
    # occurrence breaks ties.
    ranked = sorted(counts, key=lambda term: counts[term], reverse=True)
    return ranked[:top_n]
