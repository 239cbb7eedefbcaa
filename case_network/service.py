"""Analysis facade: combine, build and analyze a case network with configured defaults."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, TypeVar

from case_network.cache import AnalysisCache, content_hash
from case_network.config_loader import Settings, get_settings
from case_network.errors import InputFormatError
from case_network.graph.builder import GraphBuilder
from case_network.graph.catalog import DEFAULT_VIOLATIONS, Violation
from case_network.graph.centrality import compute_centrality, top_central_nodes
from case_network.graph.clustering import cluster_entities
from case_network.graph.combiner import CombinedNetwork, EntityCombiner
from case_network.graph.communities import detect_communities
from case_network.graph.entities import (
    Connection,
    Discrepancy,
    Entity,
    ExtractedEntity,
    TimelineEvent,
    pick,
)
from case_network.graph.limits import check_graph_size
from case_network.graph.models import (
    AnalysisMode,
    CentralityResult,
    Cluster,
    Community,
    GraphData,
    GraphLink,
    GraphNode,
    PathResult,
)
from case_network.graph.paths import find_shortest_path
from case_network.graph.snapshot import NetworkSnapshot, network_snapshot
from case_network.graph.timeline import DateLike, filter_by_date_range

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _load_records(items: Any, loader: Callable[[dict], T], kind: str) -> list[T]:
    """Convert raw dicts with ``loader``, skipping malformed records."""
    records: list[T] = []
    for raw in items or []:
        if not isinstance(raw, dict):
            logger.debug(f"Skipping non-object {kind} record: {raw!r}")
            continue
        try:
            records.append(loader(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping malformed {kind} record: {e}")
    return records


@dataclass
class NetworkInput:
    """Raw records for one analysis run."""

    static_entities: list[Entity] = field(default_factory=list)
    static_connections: list[Connection] = field(default_factory=list)
    extracted_entities: list[ExtractedEntity] = field(default_factory=list)
    extracted_events: list[TimelineEvent] = field(default_factory=list)
    static_events: list[TimelineEvent] = field(default_factory=list)
    discrepancies: list[Discrepancy] = field(default_factory=list)
    violations: Optional[list[Violation]] = None     # None = DEFAULT_VIOLATIONS
    case_filter_active: bool = False

    @property
    def events(self) -> list[TimelineEvent]:
        """Static events followed by extracted events."""
        return [*self.static_events, *self.extracted_events]

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkInput":
        """Load from a plain document; accepts camelCase or snake_case keys.

        Raises:
            InputFormatError: If ``data`` is not a mapping
        """
        if not isinstance(data, dict):
            raise InputFormatError(f"Expected a JSON object, got {type(data).__name__}")

        violations = pick(data, "violations")
        return cls(
            static_entities=_load_records(
                pick(data, "static_entities", "staticEntities", "entities"), Entity.from_dict, "entity"),
            static_connections=_load_records(
                pick(data, "static_connections", "staticConnections", "connections"),
                Connection.from_dict, "connection"),
            extracted_entities=_load_records(
                pick(data, "extracted_entities", "extractedEntities"), ExtractedEntity.from_dict,
                "extracted entity"),
            extracted_events=_load_records(
                pick(data, "extracted_events", "extractedEvents"), TimelineEvent.from_dict, "event"),
            static_events=_load_records(
                pick(data, "static_events", "staticEvents", "timeline"), TimelineEvent.from_dict, "event"),
            discrepancies=_load_records(
                pick(data, "discrepancies"), Discrepancy.from_dict, "discrepancy"),
            violations=(
                _load_records(violations, Violation.from_dict, "violation")
                if violations is not None else None
            ),
            case_filter_active=bool(pick(data, "case_filter_active", "caseFilterActive", default=False)),
        )


class NetworkAnalysisService:
    """
    Run the case network pipeline with defaults taken from Settings.

    Every analysis is a pure function of its inputs; when caching is enabled
    results are memoized by content hash. Unseeded community detection is
    never cached because it is not reproducible.
    """

    def __init__(self, settings: Optional[Settings] = None, cache: Optional[AnalysisCache] = None):
        """Initialize service.

        Args:
            settings: Settings instance; loaded via get_settings() if None
            cache: Explicit cache; created from settings.cache if None and enabled
        """
        self.settings = settings or get_settings()
        if cache is None and self.settings.cache.enabled:
            cache = AnalysisCache(max_entries=self.settings.cache.max_entries)
        self.cache = cache

        self.combiner = EntityCombiner(
            inferred_strength=self.settings.combiner.inferred_strength,
            relationship_preview_chars=self.settings.combiner.relationship_preview_chars,
        )
        self.builder = GraphBuilder(
            event_cap=self.settings.builder.event_cap,
            violation_strength=self.settings.builder.violation_strength,
            event_strength=self.settings.builder.event_strength,
        )

    def _memoize(self, operation: str, parts: tuple, compute: Callable[[], T]) -> T:
        if self.cache is None:
            return compute()
        key = content_hash(operation, *parts)
        return self.cache.get_or_compute(key, compute)

    def _check_size(self, nodes: list[GraphNode], links: list[GraphLink]) -> None:
        check_graph_size(
            nodes,
            links,
            max_nodes=self.settings.limits.max_nodes,
            max_links=self.settings.limits.max_links,
        )

    # ========== Pipeline ==========

    def combine(self, network_input: NetworkInput) -> CombinedNetwork:
        return self._memoize(
            "combine",
            (network_input, self.settings.combiner),
            lambda: self.combiner.combine(
                network_input.static_entities,
                network_input.static_connections,
                network_input.extracted_entities,
                network_input.extracted_events,
                network_input.case_filter_active,
            ),
        )

    def build(self, network_input: NetworkInput) -> GraphData:
        """Combine then build the graph for ``network_input``."""
        combined = self.combine(network_input)
        violations = (
            DEFAULT_VIOLATIONS if network_input.violations is None else network_input.violations
        )
        return self._memoize(
            "build",
            (combined, violations, network_input.discrepancies, network_input.events,
             self.settings.builder),
            lambda: self.builder.build(
                combined.entities,
                combined.connections,
                violations,
                network_input.discrepancies,
                network_input.events,
            ),
        )

    # ========== Analyses ==========

    def clusters(
        self,
        entities: Iterable[Entity],
        connections: Iterable[Connection],
        min_cluster_size: Optional[int] = None,
        min_connection_strength: Optional[int] = None,
    ) -> list[Cluster]:
        entities, connections = list(entities), list(connections)
        if min_cluster_size is None:
            min_cluster_size = self.settings.clustering.min_cluster_size
        if min_connection_strength is None:
            min_connection_strength = self.settings.clustering.min_connection_strength
        return self._memoize(
            "clusters",
            (entities, connections, min_cluster_size, min_connection_strength),
            lambda: cluster_entities(entities, connections, min_cluster_size, min_connection_strength),
        )

    def centrality(self, nodes: list[GraphNode], links: list[GraphLink]) -> list[CentralityResult]:
        self._check_size(nodes, links)
        config = self.settings.centrality
        return self._memoize(
            "centrality",
            (nodes, links, config),
            lambda: compute_centrality(
                nodes,
                links,
                sample_size=config.sample_size,
                degree_weight=config.degree_weight,
                betweenness_weight=config.betweenness_weight,
            ),
        )

    def communities(
        self,
        nodes: list[GraphNode],
        links: list[GraphLink],
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> list[Community]:
        self._check_size(nodes, links)
        config = self.settings.communities
        if seed is None:
            seed = config.seed

        def compute() -> list[Community]:
            return detect_communities(
                nodes, links, max_iterations=config.max_iterations, seed=seed, rng=rng
            )

        if seed is None or rng is not None:
            return compute()
        return self._memoize("communities", (nodes, links, config.max_iterations, seed), compute)

    def shortest_path(
        self,
        nodes: list[GraphNode],
        links: list[GraphLink],
        source_id: str,
        target_id: str,
    ) -> Optional[PathResult]:
        return find_shortest_path(nodes, links, source_id, target_id)

    def timeline(
        self,
        nodes: list[GraphNode],
        links: list[GraphLink],
        start_date: DateLike = None,
        end_date: DateLike = None,
    ) -> tuple[list[GraphNode], list[GraphLink]]:
        return filter_by_date_range(nodes, links, start_date, end_date)

    def snapshot(
        self,
        network_input: NetworkInput,
        relationships_total: int = 0,
        case_id: Optional[str] = None,
    ) -> NetworkSnapshot:
        combined = self.combine(network_input)
        return network_snapshot(combined.entities, combined.connections, relationships_total, case_id)

    def analyze(
        self,
        network_input: NetworkInput,
        mode: AnalysisMode | str = AnalysisMode.NONE,
        source_id: Optional[str] = None,
        target_id: Optional[str] = None,
        start_date: DateLike = None,
        end_date: DateLike = None,
        seed: Optional[int] = None,
        top: Optional[int] = None,
    ) -> dict[str, Any]:
        """Build the graph and apply one analysis overlay.

        Args:
            network_input: Raw records
            mode: Analysis overlay to compute
            source_id: Path start (pathfinding)
            target_id: Path end (pathfinding)
            start_date: Lower date bound (timeline)
            end_date: Upper date bound (timeline)
            seed: Shuffle seed (communities)
            top: Keep only the N most central nodes (centrality)

        Returns:
            JSON-serializable dict with the graph and the overlay result
        """
        mode = AnalysisMode(mode)
        graph = self.build(network_input)
        result: dict[str, Any] = {"mode": mode.value, "graph": graph.to_dict()}

        if mode == AnalysisMode.PATHFINDING:
            if not source_id or not target_id:
                raise ValueError("pathfinding requires source_id and target_id")
            path = self.shortest_path(graph.nodes, graph.links, source_id, target_id)
            result["path"] = path.to_dict() if path else None
        elif mode == AnalysisMode.CENTRALITY:
            scores = self.centrality(graph.nodes, graph.links)
            if top is not None:
                scores = top_central_nodes(scores, top)
            result["centrality"] = [s.to_dict() for s in scores]
        elif mode == AnalysisMode.COMMUNITIES:
            communities = self.communities(graph.nodes, graph.links, seed=seed)
            result["communities"] = [c.to_dict() for c in communities]
        elif mode == AnalysisMode.TIMELINE:
            nodes, links = self.timeline(graph.nodes, graph.links, start_date, end_date)
            result["timeline"] = {
                "nodes": [n.to_dict() for n in nodes],
                "links": [l.to_dict() for l in links],
            }

        logger.info(
            f"Analysis '{mode.value}': {graph.stats.total_nodes} nodes, {graph.stats.total_links} links"
        )
        return result
