"""Case graph construction and analysis."""

from case_network.graph.builder import GraphBuilder, build_graph
from case_network.graph.catalog import DEFAULT_VIOLATIONS, Violation
from case_network.graph.centrality import compute_centrality, top_central_nodes
from case_network.graph.clustering import UnionFind, cluster_entities
from case_network.graph.combiner import CombinedNetwork, EntityCombiner, combine
from case_network.graph.communities import detect_communities
from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Discrepancy,
    Entity,
    EntityCategory,
    EntityType,
    ExtractedEntity,
    TimelineEvent,
)
from case_network.graph.models import (
    AnalysisMode,
    CentralityResult,
    Cluster,
    Community,
    GraphData,
    GraphLink,
    GraphNode,
    GraphStats,
    NodeType,
    PathResult,
    RiskLevel,
)
from case_network.graph.paths import find_shortest_path
from case_network.graph.snapshot import NetworkSnapshot, network_snapshot
from case_network.graph.timeline import filter_by_date_range

__all__ = [
    "AnalysisMode",
    "CentralityResult",
    "Cluster",
    "CombinedNetwork",
    "Community",
    "Connection",
    "ConnectionType",
    "DEFAULT_VIOLATIONS",
    "Discrepancy",
    "Entity",
    "EntityCategory",
    "EntityCombiner",
    "EntityType",
    "ExtractedEntity",
    "GraphBuilder",
    "GraphData",
    "GraphLink",
    "GraphNode",
    "GraphStats",
    "NetworkSnapshot",
    "NodeType",
    "PathResult",
    "RiskLevel",
    "TimelineEvent",
    "UnionFind",
    "Violation",
    "build_graph",
    "cluster_entities",
    "combine",
    "compute_centrality",
    "detect_communities",
    "filter_by_date_range",
    "find_shortest_path",
    "network_snapshot",
    "top_central_nodes",
]
