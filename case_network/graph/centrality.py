"""Degree and sampled betweenness centrality.

Betweenness uses Brandes' single-source dependency accumulation run from the
first ``sample_size`` nodes in input order. When the graph has more nodes than
the sample, the scores are a sample-based proxy, not true betweenness, and are
biased toward nodes near the front of the input. Scores are raw
accumulations: on undirected graphs every pair is counted from both ends and
is not halved.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from case_network.graph.models import CentralityResult, GraphLink, GraphNode


def build_adjacency(
    nodes: Iterable[GraphNode], links: Iterable[GraphLink]
) -> dict[str, list[str]]:
    """Undirected adjacency lists in node input order.

    Links touching unknown node ids are ignored; parallel links are kept.
    A self-loop is listed once, so degrees match the builder's counts.
    """
    adjacency: dict[str, list[str]] = {}
    for node in nodes:
        adjacency.setdefault(node.id, [])
    for link in links:
        if link.source in adjacency and link.target in adjacency:
            adjacency[link.source].append(link.target)
            if link.target != link.source:
                adjacency[link.target].append(link.source)
    return adjacency


def single_source_dependencies(
    adjacency: dict[str, list[str]], source: str
) -> dict[str, float]:
    """Brandes dependency of ``source`` on every other node."""
    dist = {v: -1 for v in adjacency}
    sigma = {v: 0 for v in adjacency}
    predecessors: dict[str, list[str]] = {v: [] for v in adjacency}
    order: list[str] = []

    dist[source] = 0
    sigma[source] = 1
    queue = deque([source])
    while queue:
        v = queue.popleft()
        order.append(v)
        for w in adjacency[v]:
            if dist[w] == -1:
                dist[w] = dist[v] + 1
                queue.append(w)
            if dist[w] == dist[v] + 1:
                sigma[w] += sigma[v]
                predecessors[w].append(v)

    delta = {v: 0.0 for v in adjacency}
    for w in reversed(order):
        for v in predecessors[w]:
            delta[v] += (sigma[v] / sigma[w]) * (1 + delta[w])
    delta[source] = 0.0
    return delta


def compute_betweenness(
    adjacency: dict[str, list[str]], sample_size: Optional[int] = 30
) -> dict[str, float]:
    """Accumulate betweenness from the first ``sample_size`` sources.

    ``sample_size=None`` runs every node as a source (exact Brandes).
    """
    betweenness = {v: 0.0 for v in adjacency}
    sources = list(adjacency)
    if sample_size is not None:
        sources = sources[: max(sample_size, 0)]
    for source in sources:
        for v, dependency in single_source_dependencies(adjacency, source).items():
            betweenness[v] += dependency
    return betweenness


def compute_centrality(
    nodes: Iterable[GraphNode],
    links: Iterable[GraphLink],
    sample_size: Optional[int] = 30,
    degree_weight: float = 0.4,
    betweenness_weight: float = 0.6,
) -> list[CentralityResult]:
    """Compute degree, betweenness and a blended score for every node.

    Args:
        nodes: Graph nodes (duplicate ids are collapsed)
        links: Graph links; links to unknown nodes are ignored
        sample_size: Number of leading nodes used as betweenness sources
        degree_weight: Weight of normalized degree in the blend
        betweenness_weight: Weight of normalized betweenness in the blend

    Returns:
        One result per node, in node input order
    """
    adjacency = build_adjacency(nodes, links)
    if not adjacency:
        return []

    degree = {v: len(neighbors) for v, neighbors in adjacency.items()}
    betweenness = compute_betweenness(adjacency, sample_size)

    max_degree = max(max(degree.values()), 1)
    max_betweenness = max(max(betweenness.values()), 1)

    return [
        CentralityResult(
            node_id=v,
            degree=degree[v],
            betweenness=betweenness[v],
            normalized_score=(
                degree[v] / max_degree * degree_weight
                + betweenness[v] / max_betweenness * betweenness_weight
            ),
        )
        for v in adjacency
    ]


def top_central_nodes(results: Iterable[CentralityResult], limit: int = 10) -> list[CentralityResult]:
    """Highest blended scores first; ties keep input order."""
    return sorted(results, key=lambda r: r.normalized_score, reverse=True)[: max(limit, 0)]
