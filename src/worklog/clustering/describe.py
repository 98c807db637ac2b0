"""Theme labels, keywords and coherence for clusters."""

import numpy as np

from ..analysis.similarity import compute_similarity_matrix
from ..analysis.terms import DEFAULT_TOKENIZER, TokenizerConfig, extract_key_terms
from ..models import Cluster, WorkItem

FALLBACK_THEME = "Miscellaneous"


def theme_from_keywords(keywords: list[str]) -> str:
    """Label from the top one or two keywords."""
    if not keywords:
        return FALLBACK_THEME
    return " / ".join(k.capitalize() for k in keywords[:2])


def coherence_score(items: list[WorkItem], tokenizer: TokenizerConfig = DEFAULT_TOKENIZER) -> float:
    """Mean pairwise similarity of ``items``; 1.0 for a singleton."""
    if len(items) < 2:
        return 1.0
    matrix = compute_similarity_matrix(items, tokenizer)
    upper = matrix[np.triu_indices(len(items), k=1)]
    return float(np.clip(upper.mean(), 0.0, 1.0))


def describe_cluster(
    index: int,
    items: list[WorkItem],
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
    top_k: int = 5,
) -> Cluster:
    """Build a fully populated Cluster for one group of items."""
    keywords = extract_key_terms(items, top_k, tokenizer)
    return Cluster(
        id=f"cluster-{index}",
        items=list(items),
        keywords=keywords,
        theme=theme_from_keywords(keywords),
        coherence_score=coherence_score(items, tokenizer),
    )


def describe_clusters(
    groups: list[list[WorkItem]],
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
    top_k: int = 5,
) -> list[Cluster]:
    """Describe each group in order; ids follow group position."""
    return [describe_cluster(i, group, tokenizer, top_k) for i, group in enumerate(groups)]
