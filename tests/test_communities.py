"""Tests for label propagation communities."""

import random

from case_network.graph.communities import (
    COMMUNITY_COLORS,
    _most_frequent_label,
    detect_communities,
)


def _two_triangles(make_graph):
    return make_graph(
        ["a", "b", "c", "x", "y", "z", "lonely"],
        [("a", "b"), ("b", "c"), ("c", "a"), ("x", "y"), ("y", "z"), ("z", "x")],
    )


def test_disjoint_triangles(make_graph):
    """Test each triangle becomes its own community."""
    nodes, links = _two_triangles(make_graph)
    communities = detect_communities(nodes, links, seed=42)

    assert [c.members for c in communities] == [["a", "b", "c"], ["x", "y", "z"]]
    assert [c.id for c in communities] == [0, 1]
    assert communities[0].color == COMMUNITY_COLORS[0]
    assert communities[1].color == COMMUNITY_COLORS[1]


def test_no_singleton_communities(make_graph, path_graph):
    """Test communities always have at least two members."""
    nodes, links = _two_triangles(make_graph)
    for seed in range(10):
        for community in detect_communities(nodes, links, seed=seed):
            assert len(community.members) >= 2
            assert "lonely" not in community.members

    nodes, links = path_graph
    for seed in range(10):
        assert all(len(c.members) >= 2 for c in detect_communities(nodes, links, seed=seed))


def test_seed_is_reproducible(path_graph):
    """Test the same seed yields the same membership."""
    nodes, links = path_graph
    first = detect_communities(nodes, links, seed=7)
    second = detect_communities(nodes, links, seed=7)
    assert [c.to_dict() for c in first] == [c.to_dict() for c in second]


def test_explicit_rng_takes_precedence(path_graph):
    """Test an explicit Random instance overrides the seed."""
    nodes, links = path_graph
    with_rng = detect_communities(nodes, links, seed=1, rng=random.Random(99))
    with_seed = detect_communities(nodes, links, seed=99)
    assert [c.members for c in with_rng] == [c.members for c in with_seed]


def test_sorted_by_size(make_graph):
    """Test larger communities come first."""
    nodes, links = make_graph(
        ["p", "q", "a", "b", "c", "d"],
        [("p", "q"), ("a", "b"), ("a", "c"), ("a", "d"), ("b", "c"), ("c", "d"), ("b", "d")],
    )
    communities = detect_communities(nodes, links, seed=3)
    sizes = [len(c.members) for c in communities]
    assert sizes == sorted(sizes, reverse=True)
    assert communities[-1].members == ["p", "q"]


def test_zero_iterations_yields_nothing(path_graph):
    """Test without propagation every node keeps its own label."""
    nodes, links = path_graph
    assert detect_communities(nodes, links, max_iterations=0, seed=1) == []


def test_empty_graph():
    """Test no nodes yield no communities."""
    assert detect_communities([], [], seed=1) == []


def test_most_frequent_label_ties_go_lowest():
    """Test tie-breaking picks the smallest label."""
    labels = {"a": 5, "b": 2, "c": 5, "d": 2}
    assert _most_frequent_label(["a", "b", "c", "d"], labels, current=9) == 2
    assert _most_frequent_label(["a", "b", "c"], labels, current=9) == 5
