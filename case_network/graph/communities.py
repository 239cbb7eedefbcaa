"""Label propagation community detection for visual grouping.

Each round visits nodes in a shuffled order. Without a ``seed`` (or an explicit
``rng``) the shuffle draws from system randomness, so membership can differ
between calls on the same graph. Pass a seed to make results reproducible.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from case_network.graph.centrality import build_adjacency
from case_network.graph.models import Community, GraphLink, GraphNode

logger = logging.getLogger(__name__)

COMMUNITY_COLORS = (
    "hsl(var(--chart-1))",
    "hsl(var(--chart-2))",
    "hsl(var(--chart-3))",
    "hsl(var(--chart-4))",
    "hsl(var(--chart-5))",
    "#8b5cf6",
    "#06b6d4",
    "#f43f5e",
    "#84cc16",
    "#fb923c",
)


def _most_frequent_label(neighbors: list[str], labels: dict[str, int], current: int) -> int:
    counts: dict[int, int] = {}
    for neighbor in neighbors:
        label = labels[neighbor]
        counts[label] = counts.get(label, 0) + 1

    best_label = current
    best_count = 0
    # Ascending label order: ties go to the lowest label
    for label in sorted(counts):
        if counts[label] > best_count:
            best_count = counts[label]
            best_label = label
    return best_label


def propagate_labels(
    adjacency: dict[str, list[str]],
    max_iterations: int = 20,
    rng: Optional[random.Random] = None,
) -> dict[str, int]:
    """Run label propagation and return the final label per node."""
    rng = rng or random.Random()
    labels = {node_id: index for index, node_id in enumerate(adjacency)}
    order = list(adjacency)

    for iteration in range(max_iterations):
        changed = False
        rng.shuffle(order)
        for node_id in order:
            neighbors = adjacency[node_id]
            if not neighbors:
                continue
            new_label = _most_frequent_label(neighbors, labels, labels[node_id])
            if new_label != labels[node_id]:
                labels[node_id] = new_label
                changed = True
        if not changed:
            logger.debug(f"Label propagation converged after {iteration + 1} rounds")
            break
    return labels


def detect_communities(
    nodes: Iterable[GraphNode],
    links: Iterable[GraphLink],
    max_iterations: int = 20,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> list[Community]:
    """Group nodes into communities of two or more members.

    Args:
        nodes: Graph nodes
        links: Graph links; links to unknown nodes are ignored
        max_iterations: Upper bound on propagation rounds
        seed: Seed for the visitation shuffle
        rng: Explicit random source; takes precedence over ``seed``

    Returns:
        Communities sorted by size, largest first, with sequential ids
    """
    adjacency = build_adjacency(nodes, links)
    if not adjacency:
        return []
    if rng is None:
        rng = random.Random(seed)

    labels = propagate_labels(adjacency, max_iterations=max_iterations, rng=rng)

    groups: dict[int, list[str]] = {}
    for node_id in adjacency:
        groups.setdefault(labels[node_id], []).append(node_id)

    ordered = [groups[label] for label in sorted(groups) if len(groups[label]) >= 2]
    ordered.sort(key=len, reverse=True)

    return [
        Community(id=index, members=members, color=COMMUNITY_COLORS[index % len(COMMUNITY_COLORS)])
        for index, members in enumerate(ordered)
    ]
