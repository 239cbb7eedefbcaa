"""Union-Find clustering of entities over strong connections."""

from __future__ import annotations

import logging
import math
from typing import Hashable, Iterable

from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
)
from case_network.graph.models import Cluster

logger = logging.getLogger(__name__)

CLUSTER_COLORS = (
    "hsl(262, 83%, 58%)",
    "hsl(221, 83%, 53%)",
    "hsl(142, 76%, 36%)",
    "hsl(25, 95%, 53%)",
    "hsl(340, 82%, 52%)",
    "hsl(174, 72%, 40%)",
)


class UnionFind:
    """Disjoint sets with union by rank and path-compressed find."""

    def __init__(self, elements: Iterable[Hashable] = ()):
        self.parent: dict = {}
        self.rank: dict = {}
        for element in elements:
            self.add(element)

    def add(self, x: Hashable) -> None:
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def __contains__(self, x: Hashable) -> bool:
        return x in self.parent

    def find(self, x: Hashable) -> Hashable:
        """Return the root of ``x``; unknown elements become singletons."""
        self.add(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: Hashable, y: Hashable) -> None:
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return

        rank_x = self.rank[root_x]
        rank_y = self.rank[root_y]
        if rank_x < rank_y:
            self.parent[root_x] = root_y
        elif rank_x > rank_y:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] = rank_x + 1

    def connected(self, x: Hashable, y: Hashable) -> bool:
        return self.find(x) == self.find(y)


def connection_counts(
    entities: Iterable[Entity], connections: Iterable[Connection]
) -> dict[str, int]:
    """Count every (unfiltered) connection incident to each entity."""
    counts = {e.id: 0 for e in entities}
    for conn in connections:
        if conn.source in counts:
            counts[conn.source] += 1
        if conn.target in counts and conn.target != conn.source:
            counts[conn.target] += 1
    return counts


def generate_cluster_name(members: list[Entity], connections: Iterable[Connection]) -> str:
    """Name a cluster from a fixed decision table; the first matching rule wins."""
    member_ids = {e.id for e in members}
    type_counts: dict[ConnectionType, int] = {}
    for conn in connections:
        if conn.source in member_ids and conn.target in member_ids:
            type_counts[conn.type] = type_counts.get(conn.type, 0) + 1

    dominant = max(type_counts, key=type_counts.get) if type_counts else None
    has_agency = any(e.type == EntityType.AGENCY for e in members)
    has_org = any(e.type == EntityType.ORGANIZATION for e in members)
    antagonists = sum(1 for e in members if e.category == EntityCategory.ANTAGONIST)
    officials = sum(1 for e in members if e.category == EntityCategory.OFFICIAL)

    if dominant == ConnectionType.FAMILY:
        return "Family Network"
    if dominant == ConnectionType.ADVERSARIAL and antagonists > 2:
        return "Conspiracy Network"
    if has_agency and officials > 2:
        return "Institutional Network"
    if has_org:
        return "Business Network"
    if dominant == ConnectionType.LEGAL:
        return "Legal Proceedings"
    if dominant == ConnectionType.PROFESSIONAL:
        return "Professional Network"
    return "Entity Cluster"


def cluster_density(member_ids: set[str], connections: Iterable[Connection]) -> int:
    """Internal distinct pairs over C(n, 2), as a percentage rounded half up."""
    n = len(member_ids)
    max_pairs = n * (n - 1) / 2
    if max_pairs <= 0:
        return 0
    internal = {
        conn.key
        for conn in connections
        if conn.source != conn.target
        and conn.source in member_ids
        and conn.target in member_ids
    }
    return math.floor(len(internal) / max_pairs * 100 + 0.5)


def cluster_entities(
    entities: Iterable[Entity],
    connections: Iterable[Connection],
    min_cluster_size: int = 2,
    min_connection_strength: int = 3,
) -> list[Cluster]:
    """Partition entities into clusters joined by strong connections.

    Only connections with ``strength >= min_connection_strength`` are unioned;
    key entities and density use the full connection list.

    Args:
        entities: Combined entities
        connections: Combined connections
        min_cluster_size: Clusters smaller than this are dropped
        min_connection_strength: Minimum strength for a tie to join clusters

    Returns:
        Clusters sorted by size, largest first
    """
    entity_list: list[Entity] = []
    by_id: dict[str, Entity] = {}
    for entity in entities:
        if entity.id and entity.id not in by_id:
            by_id[entity.id] = entity
            entity_list.append(entity)
    if not entity_list:
        return []
    connection_list = list(connections)

    uf = UnionFind(by_id)
    for conn in connection_list:
        if conn.strength < min_connection_strength:
            continue
        if conn.source not in by_id or conn.target not in by_id:
            continue
        uf.union(conn.source, conn.target)

    groups: dict[str, list[str]] = {}
    for entity in entity_list:
        groups.setdefault(uf.find(entity.id), []).append(entity.id)

    valid = [members for members in groups.values() if len(members) >= min_cluster_size]
    counts = connection_counts(entity_list, connection_list)

    clusters: list[Cluster] = []
    for index, member_ids in enumerate(valid):
        members = [by_id[mid] for mid in member_ids]
        key_entity = member_ids[0]
        for mid in member_ids[1:]:
            if counts[mid] > counts[key_entity]:
                key_entity = mid

        clusters.append(
            Cluster(
                id=f"cluster-{index}",
                name=generate_cluster_name(members, connection_list),
                entities=member_ids,
                color=CLUSTER_COLORS[index % len(CLUSTER_COLORS)],
                density=cluster_density(set(member_ids), connection_list),
                key_entity=key_entity,
            )
        )

    clusters.sort(key=lambda c: len(c.entities), reverse=True)
    logger.debug(f"Clustered {len(entity_list)} entities into {len(clusters)} clusters")
    return clusters
