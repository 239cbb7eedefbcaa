"""Build the unified node/link graph from entities and auxiliary records."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from case_network.graph.catalog import Violation
from case_network.graph.entities import (
    Connection,
    Discrepancy,
    Entity,
    EntityCategory,
    EntityType,
    TimelineEvent,
)
from case_network.graph.matching import is_mentioned
from case_network.graph.models import (
    EVENT_PARTICIPANT_LINK,
    VIOLATION_LINK,
    GraphData,
    GraphLink,
    GraphNode,
    GraphStats,
    NodeType,
    RiskLevel,
)

logger = logging.getLogger(__name__)

ENTITY_NODE_TYPES: dict[EntityType, NodeType] = {
    EntityType.PERSON: NodeType.PERSON,
    EntityType.ORGANIZATION: NodeType.ORGANIZATION,
    EntityType.AGENCY: NodeType.ORGANIZATION,
    EntityType.LEGAL: NodeType.PERSON,
}

CATEGORY_RISK: dict[EntityCategory, RiskLevel] = {
    EntityCategory.ANTAGONIST: RiskLevel.CRITICAL,
    EntityCategory.PROTAGONIST: RiskLevel.LOW,
    EntityCategory.OFFICIAL: RiskLevel.MEDIUM,
    EntityCategory.NEUTRAL: RiskLevel.LOW,
}

EVENT_CATEGORY_RISK: dict[str, RiskLevel] = {
    "Criminal Allegation": RiskLevel.HIGH,
    "Harassment": RiskLevel.HIGH,
    "Legal Proceeding": RiskLevel.MEDIUM,
}

EVENT_NAME_CHARS = 40


def category_to_risk(category: Optional[EntityCategory]) -> RiskLevel:
    return CATEGORY_RISK.get(category, RiskLevel.LOW)


def severity_to_risk(severity: Optional[str]) -> RiskLevel:
    """Pass through critical/high/medium; anything else is low."""
    value = (severity or "").strip().lower()
    if value in (RiskLevel.CRITICAL.value, RiskLevel.HIGH.value, RiskLevel.MEDIUM.value):
        return RiskLevel(value)
    return RiskLevel.LOW


def event_risk(category: Optional[str]) -> RiskLevel:
    return EVENT_CATEGORY_RISK.get((category or "").strip(), RiskLevel.LOW)


def recompute_degrees(nodes: list[GraphNode], links: list[GraphLink]) -> None:
    """Set every node's ``connections`` to its incident link count."""
    counts = {node.id: 0 for node in nodes}
    for link in links:
        if link.source in counts:
            counts[link.source] += 1
        if link.target in counts and link.target != link.source:
            counts[link.target] += 1
    for node in nodes:
        node.connections = counts[node.id]


class GraphBuilder:
    """
    Convert combined entities and auxiliary records into a graph.

    Node order: entities, catalogued violations, discrepancies, then the
    first ``event_cap`` events. Links whose endpoints are missing are
    dropped. Construction is deterministic and never raises on missing
    optional fields.
    """

    def __init__(
        self,
        event_cap: int = 12,
        violation_strength: int = 4,
        event_strength: int = 3,
    ):
        """Initialize builder.

        Args:
            event_cap: Maximum number of events added as nodes
            violation_strength: Strength of violation -> entity links
            event_strength: Strength of event -> participant links
        """
        self.event_cap = event_cap
        self.violation_strength = violation_strength
        self.event_strength = event_strength

    def build(
        self,
        entities: Iterable[Entity],
        connections: Iterable[Connection],
        violations: Iterable[Violation] = (),
        discrepancies: Iterable[Discrepancy] = (),
        events: Sequence[TimelineEvent] = (),
    ) -> GraphData:
        """Build nodes, links and stats.

        Args:
            entities: Combined entities
            connections: Combined connections
            violations: Violation catalog entries (see catalog.DEFAULT_VIOLATIONS)
            discrepancies: Discrepancy records (isolated nodes)
            events: Static events followed by extracted events

        Returns:
            GraphData with nodes, links and stats
        """
        nodes: list[GraphNode] = []
        links: list[GraphLink] = []
        node_ids: set[str] = set()

        def add_node(node: GraphNode) -> bool:
            if node.id in node_ids:
                logger.debug(f"Skipping duplicate node id {node.id}")
                return False
            nodes.append(node)
            node_ids.add(node.id)
            return True

        entity_list = [e for e in entities if e.id and e.name]
        entity_ids: set[str] = set()
        for entity in entity_list:
            if add_node(self._entity_node(entity)):
                entity_ids.add(entity.id)

        for violation in violations:
            self._add_violation(violation, entity_ids, add_node, links)

        for discrepancy in discrepancies:
            add_node(self._discrepancy_node(discrepancy))

        linkable = [e for e in entity_list if e.id in entity_ids]
        for index, event in enumerate(list(events)[: self.event_cap]):
            self._add_event(index, event, linkable, add_node, links)

        for conn in connections:
            if conn.source not in node_ids or conn.target not in node_ids:
                logger.debug(f"Dropping link {conn.source}->{conn.target}: missing endpoint")
                continue
            links.append(
                GraphLink(
                    source=conn.source,
                    target=conn.target,
                    type=conn.type.value,
                    strength=conn.strength,
                    is_inferred=conn.is_inferred,
                )
            )

        recompute_degrees(nodes, links)
        stats = GraphStats.from_graph(nodes, links)
        logger.debug(f"Built graph: {stats.total_nodes} nodes, {stats.total_links} links")
        return GraphData(nodes=nodes, links=links, stats=stats)

    # ========== Node factories ==========

    @staticmethod
    def _entity_node(entity: Entity) -> GraphNode:
        return GraphNode(
            id=entity.id,
            name=entity.name,
            type=ENTITY_NODE_TYPES.get(entity.type, NodeType.PERSON),
            risk_level=category_to_risk(entity.category),
            description=entity.description,
            category=entity.category.value if entity.category else None,
            is_ai_extracted=entity.is_ai_extracted,
            metadata={"role": entity.role, "type": entity.type.value},
        )

    def _add_violation(self, violation, entity_ids, add_node, links) -> None:
        node_id = f"violation-{violation.id}"
        added = add_node(
            GraphNode(
                id=node_id,
                name=violation.name,
                type=NodeType.VIOLATION,
                risk_level=violation.severity,
                description=violation.article,
                metadata={"article": violation.article, "framework": violation.framework},
            )
        )
        if not added:
            return
        for entity_id in violation.related_entities:
            if entity_id not in entity_ids:
                continue
            links.append(
                GraphLink(
                    source=node_id,
                    target=entity_id,
                    type=VIOLATION_LINK,
                    strength=self.violation_strength,
                    is_inferred=False,
                )
            )

    @staticmethod
    def _discrepancy_node(discrepancy: Discrepancy) -> GraphNode:
        return GraphNode(
            id=f"discrepancy-{discrepancy.id}",
            name=discrepancy.title,
            type=NodeType.VIOLATION,
            risk_level=severity_to_risk(discrepancy.severity),
            description=discrepancy.description,
            metadata={
                "type": discrepancy.discrepancy_type,
                "legal_ref": discrepancy.legal_reference,
                "dates": list(discrepancy.related_dates),
            },
        )

    def _add_event(self, index, event, entities, add_node, links) -> None:
        node_id = f"event-{index}"
        description = event.description or ""
        added = add_node(
            GraphNode(
                id=node_id,
                name=f"{description[:EVENT_NAME_CHARS]}...",
                type=NodeType.EVENT,
                risk_level=event_risk(event.category),
                description=description,
                category=event.category or None,
                metadata={
                    "date": event.date,
                    "individuals": event.individuals,
                    "outcome": event.outcome,
                },
            )
        )
        if not added:
            return

        individuals = (event.individuals or "").lower()
        for entity in entities:
            if is_mentioned(individuals, entity.name, include_full_name=False):
                links.append(
                    GraphLink(
                        source=node_id,
                        target=entity.id,
                        type=EVENT_PARTICIPANT_LINK,
                        strength=self.event_strength,
                        is_inferred=True,
                    )
                )


def build_graph(
    entities: Iterable[Entity],
    connections: Iterable[Connection],
    violations: Iterable[Violation] = (),
    discrepancies: Iterable[Discrepancy] = (),
    events: Sequence[TimelineEvent] = (),
) -> GraphData:
    """Build with default parameters."""
    return GraphBuilder().build(entities, connections, violations, discrepancies, events)
