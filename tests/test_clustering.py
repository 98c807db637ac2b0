"""Tests for clustering, cluster description and cross-cluster links."""

from datetime import datetime

from worklog.clustering.cluster import cluster_items, partition
from worklog.clustering.describe import (
    FALLBACK_THEME,
    coherence_score,
    describe_cluster,
    theme_from_keywords,
)
from worklog.clustering.relationships import find_cross_cluster_connections
from worklog.analysis.similarity import compute_similarity_matrix
from worklog.models import Cluster, WorkItem


def _make_item(title, description=None):
    return WorkItem(source="git", timestamp=datetime(2025, 1, 15, 12), title=title, description=description)


def _make_cluster(cid, keywords):
    return Cluster(id=cid, items=[], keywords=keywords, theme=cid, coherence_score=0.5)


def test_empty_input():
    assert cluster_items([]) == []


def test_single_item():
    clusters = cluster_items([_make_item("Completely unique standalone task")])
    assert len(clusters) == 1
    assert len(clusters[0].items) == 1
    assert clusters[0].coherence_score == 1
    assert clusters[0].id == "cluster-0"


def test_similar_items_group():
    items = [
        _make_item("Fix authentication bug"),
        _make_item("Fix auth token bug"),
        _make_item("Fix authentication issue"),
    ]
    clusters = cluster_items(items, 0.2)
    assert len(clusters) == 1
    assert [c.id for c in clusters] == ["cluster-0"]


def test_clusters_partition_input():
    items = [
        _make_item("Fix authentication bug"),
        _make_item("Resolve auth token issue"),
        _make_item("Update product database schema"),
        _make_item("Add new product fields"),
    ]
    clusters = cluster_items(items, 0.2)
    merged = [item for c in clusters for item in c.items]
    assert sorted(merged, key=items.index) == items
    assert len(merged) == len(items)
    assert [c.id for c in clusters] == [f"cluster-{i}" for i in range(len(clusters))]


def test_threshold_affects_cluster_count():
    items = [
        _make_item("Fix authentication bug"),
        _make_item("Resolve auth issue"),
        _make_item("Update auth handler"),
        _make_item("Database migration"),
        _make_item("Schema update"),
    ]
    low = cluster_items(items, 0.1)
    high = cluster_items(items, 0.5)
    assert len(low) <= len(high)
    assert len(low) == 3
    assert len(high) == 5


def test_three_themes():
    items = [
        _make_item("Fix OAuth2 authentication flow"),
        _make_item("Update JWT token validation"),
        _make_item("Resolve login session issue"),
        _make_item("Add new database migration"),
        _make_item("Update PostgreSQL schema"),
        _make_item("Fix database connection pooling"),
        _make_item("Improve button styles"),
        _make_item("Fix CSS layout issues"),
        _make_item("Update React component styling"),
    ]
    clusters = cluster_items(items, 0.15)
    assert len(clusters) >= 2
    for cluster in clusters:
        assert len(cluster.items) >= 1
        assert 0 < cluster.coherence_score <= 1


def test_order_sensitivity():
    a = _make_item("login page")
    b = _make_item("schema migration")
    c = _make_item("login schema")

    # c ties between both groups; the earlier group wins
    forward = cluster_items([a, b, c], 0.3)
    assert [x.items for x in forward] == [[a, c], [b]]

    # Starting from the bridging item pulls everything together
    backward = cluster_items([c, b, a], 0.3)
    assert [x.items for x in backward] == [[c, b, a]]


def test_partition_single_link():
    items = [_make_item("login page"), _make_item("login form"), _make_item("form validation")]
    matrix = compute_similarity_matrix(items)
    # third item only resembles the second member of the first group
    assert partition(matrix, 0.3) == [[0, 1, 2]]


def test_cluster_has_theme_keywords_coherence():
    clusters = cluster_items([_make_item("Fix authentication bug"), _make_item("Resolve auth issue")], 0.1)
    assert clusters[0].theme
    assert len(clusters[0].keywords) > 0
    assert 0 <= clusters[0].coherence_score <= 1


def test_theme_from_keywords():
    assert theme_from_keywords(["authentication", "bug", "fix"]) == "Authentication / Bug"
    assert theme_from_keywords(["login"]) == "Login"
    assert theme_from_keywords([]) == FALLBACK_THEME


def test_describe_stop_word_cluster():
    cluster = describe_cluster(3, [_make_item("the and"), _make_item("of it")])
    assert cluster.id == "cluster-3"
    assert cluster.keywords == []
    assert cluster.theme == "Miscellaneous"
    assert cluster.coherence_score == 0.0


def test_coherence_is_mean_pairwise():
    items = [_make_item("login page"), _make_item("login form"), _make_item("login page")]
    # pairs: 1/3, 1.0, 1/3
    assert abs(coherence_score(items) - (1 / 3 + 1 + 1 / 3) / 3) < 1e-9
    assert coherence_score(items[:1]) == 1.0


def test_describe_keywords_capped():
    cluster = describe_cluster(0, [_make_item("alpha beta gamma delta epsilon zeta eta")], top_k=5)
    assert cluster.keywords == ["alpha", "beta", "gamma", "delta", "epsilon"]


def test_connection_for_shared_keyword():
    clusters = [
        _make_cluster("cluster-0", ["auth", "login", "token"]),
        _make_cluster("cluster-1", ["token", "security", "encryption"]),
    ]
    connections = find_cross_cluster_connections(clusters)
    assert len(connections) == 1
    assert connections[0].from_id == "cluster-0"
    assert connections[0].to_id == "cluster-1"
    assert "token" in connections[0].relationship


def test_no_connection_for_disjoint_keywords():
    clusters = [
        _make_cluster("cluster-0", ["auth", "login"]),
        _make_cluster("cluster-1", ["database", "schema"]),
    ]
    assert find_cross_cluster_connections(clusters) == []


def test_connection_order_and_multiple_keywords():
    clusters = [
        _make_cluster("cluster-0", ["token", "login", "auth"]),
        _make_cluster("cluster-1", ["auth", "schema", "token"]),
        _make_cluster("cluster-2", ["login", "schema"]),
    ]
    connections = find_cross_cluster_connections(clusters)
    assert [(c.from_id, c.to_id) for c in connections] == [
        ("cluster-0", "cluster-1"),
        ("cluster-0", "cluster-2"),
        ("cluster-1", "cluster-2"),
    ]
    assert connections[0].relationship == "token, auth"
    assert connections[0].shared_keywords == ["token", "auth"]
    assert connections[2].relationship == "schema"


def test_no_self_connections():
    assert find_cross_cluster_connections([_make_cluster("cluster-0", ["auth"])]) == []


def test_cyrillic_near_duplicates_group():
    items = [_make_item("Исправить авторизацию"), _make_item("Исправить авторизацию токен")]
    clusters = cluster_items(items, 0.3)
    assert len(clusters) == 1
    assert clusters[0].keywords == ["исправить", "авторизацию", "токен"]
    assert clusters[0].theme == "Исправить / Авторизацию"
    assert abs(clusters[0].coherence_score - 2 / 3) < 1e-9


def test_accented_titles_group():
    items = [_make_item("Añadir caché de sesión"), _make_item("Invalidar caché de sesión")]
    clusters = cluster_items(items, 0.3)
    assert len(clusters) == 1
    assert clusters[0].keywords[:3] == ["caché", "de", "sesión"]
