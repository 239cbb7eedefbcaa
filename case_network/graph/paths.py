"""Unweighted shortest paths over the undirected case graph."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from case_network.graph.centrality import build_adjacency
from case_network.graph.models import GraphLink, GraphNode, PathResult


def find_shortest_path(
    nodes: Iterable[GraphNode],
    links: Iterable[GraphLink],
    source_id: str,
    target_id: str,
) -> Optional[PathResult]:
    """Breadth-first search from ``source_id`` to ``target_id``.

    Returns:
        PathResult including both endpoints, or None when either id is not a
        node or the two are not connected
    """
    adjacency = build_adjacency(nodes, links)
    if source_id not in adjacency or target_id not in adjacency:
        return None
    if source_id == target_id:
        return PathResult(path=[source_id], length=0)

    parent: dict[str, Optional[str]] = {source_id: None}
    queue = deque([source_id])
    while queue:
        current = queue.popleft()
        if current == target_id:
            path: list[str] = []
            node: Optional[str] = current
            while node is not None:
                path.append(node)
                node = parent[node]
            path.reverse()
            return PathResult(path=path, length=len(path) - 1)
        for neighbor in adjacency[current]:
            if neighbor not in parent:
                parent[neighbor] = current
                queue.append(neighbor)
    return None
