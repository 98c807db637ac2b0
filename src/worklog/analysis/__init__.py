"""Lexical analysis of work item text."""

from .similarity import compute_similarity_matrix, item_similarity, jaccard
from .terms import (
    DEFAULT_STOP_WORDS,
    DEFAULT_TOKENIZER,
    TokenizerConfig,
    extract_key_terms,
    item_text,
    normalize_text,
    tokenize,
)

__all__ = [
    "DEFAULT_STOP_WORDS",
    "DEFAULT_TOKENIZER",
    "TokenizerConfig",
    "compute_similarity_matrix",
    "extract_key_terms",
    "item_similarity",
    "item_text",
    "jaccard",
    "normalize_text",
    "tokenize",
]
