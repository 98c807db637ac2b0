"""Pairwise lexical similarity between work items."""

import numpy as np

from ..models import WorkItem
from .terms import DEFAULT_TOKENIZER, TokenizerConfig, item_text, tokenize


def _canonical_text(item: WorkItem) -> str:
    """Lowercased full text with whitespace collapsed."""
    return " ".join(item_text(item).lower().split())


def jaccard(terms_a: set[str], terms_b: set[str]) -> float:
    """|A & B| / |A | B| over distinct terms; 0 when both are empty."""
    union = terms_a | terms_b
    if not union:
        return 0.0
    return len(terms_a & terms_b) / len(union)


def item_similarity(a: WorkItem, b: WorkItem, tokenizer: TokenizerConfig = DEFAULT_TOKENIZER) -> float:
    """Similarity of two items in [0, 1]; identical text scores exactly 1."""
    if _canonical_text(a) == _canonical_text(b):
        return 1.0
    return jaccard(set(tokenize(a, tokenizer)), set(tokenize(b, tokenizer)))


def compute_similarity_matrix(
    items: list[WorkItem],
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
) -> np.ndarray:
    """Build the symmetric N x N similarity matrix for ``items``.

    The diagonal is always 1.0. Each item is tokenized once; only the upper
    triangle is computed and then mirrored.
    """
    n = len(items)
    matrix = np.eye(n, dtype=float)
    if n < 2:
        return matrix

    texts = [_canonical_text(item) for item in items]
    term_sets = [set(tokenize(item, tokenizer)) for item in items]

    for i in range(n):
        for j in range(i + 1, n):
            if texts[i] == texts[j]:
                score = 1.0
            else:
                score = jaccard(term_sets[i], term_sets[j])
            matrix[i, j] = score
            matrix[j, i] = score

    return matrix
