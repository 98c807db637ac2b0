"""Keyword-overlap relationships between clusters."""

from itertools import combinations

from ..models import Cluster, CrossClusterConnection


def shared_keywords(a: Cluster, b: Cluster) -> list[str]:
    """Keywords present in both clusters, in ``a``'s ranking order."""
    other = set(b.keywords)
    return [k for k in a.keywords if k in other]


def find_cross_cluster_connections(clusters: list[Cluster]) -> list[CrossClusterConnection]:
    """Connect every pair of clusters that shares at least one keyword.

    Pairs are visited earlier cluster first, so ``from_id`` always precedes
    ``to_id`` in ``clusters``.
    """
    connections = []

    for a, b in combinations(clusters, 2):
        shared = shared_keywords(a, b)
        if not shared:
            continue
        connections.append(CrossClusterConnection(
            from_id=a.id,
            to_id=b.id,
            relationship=", ".join(shared),
            shared_keywords=shared,
        ))

    return connections
