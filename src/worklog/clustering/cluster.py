"""Greedy threshold clustering of work items."""

import logging

import numpy as np

from ..analysis.similarity import compute_similarity_matrix
from ..analysis.terms import DEFAULT_TOKENIZER, TokenizerConfig
from ..models import Cluster, WorkItem
from .describe import describe_clusters

logger = logging.getLogger(__name__)


def partition(matrix: np.ndarray, threshold: float = 0.3) -> list[list[int]]:
    """Group row indices of a similarity matrix in one left-to-right pass.

    Item ``i`` joins the existing group holding its most similar member when
    that similarity is >= ``threshold``; the earliest group wins ties.
    Otherwise it starts a new group. The result depends on input order.
    """
    groups: list[list[int]] = []

    for i in range(len(matrix)):
        best_group = -1
        best_score = -1.0
        for g, members in enumerate(groups):
            score = float(matrix[i, members].max())
            # Strict > keeps the earliest group on ties
            if score > best_score:
                best_group, best_score = g, score

        if best_group >= 0 and best_score >= threshold:
            groups[best_group].append(i)
        else:
            groups.append([i])

    return groups


def cluster_items(
    items: list[WorkItem],
    threshold: float = 0.3,
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
    top_k: int = 5,
) -> list[Cluster]:
    """Cluster work items by lexical similarity.

    Returns list of Cluster objects, each with theme, keywords and
    coherence score filled in.
    """
    if not items:
        return []

    matrix = compute_similarity_matrix(items, tokenizer)
    groups = partition(matrix, threshold)
    logger.debug(f"Clustered {len(items)} item(s) at threshold {threshold} into {len(groups)} group(s)")

    return describe_clusters(
        [[items[i] for i in members] for members in groups],
        tokenizer,
        top_k,
    )
