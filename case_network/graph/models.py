"""Graph and analysis result models for the case network."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class NodeType(str, Enum):
    PERSON = "person"
    ORGANIZATION = "organization"
    EVENT = "event"
    VIOLATION = "violation"
    LOCATION = "location"


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisMode(str, Enum):
    """Analysis overlays a caller can request for a built graph."""
    NONE = "none"
    PATHFINDING = "pathfinding"
    CENTRALITY = "centrality"
    COMMUNITIES = "communities"
    TIMELINE = "timeline"


# Link types produced by the builder besides entity connection types
VIOLATION_LINK = "violation"
EVENT_PARTICIPANT_LINK = "event-participant"


@dataclass
class GraphNode:
    """Node representing an entity, violation, discrepancy or event.

    ``metadata`` is schema-less; by convention entities carry ``role``/``type``,
    violations ``article``/``framework``, discrepancies ``type``/``legal_ref``/
    ``dates`` and events ``date``/``individuals``/``outcome``.
    """

    id: str
    name: str
    type: NodeType
    risk_level: RiskLevel
    connections: int = 0
    description: Optional[str] = None
    category: Optional[str] = None
    is_ai_extracted: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "risk_level": self.risk_level.value,
            "connections": self.connections,
            "description": self.description,
            "category": self.category,
            "is_ai_extracted": self.is_ai_extracted,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphNode":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            type=NodeType(data.get("type", "person")),
            risk_level=RiskLevel(data.get("risk_level", data.get("riskLevel", "low"))),
            connections=int(data.get("connections", 0)),
            description=data.get("description"),
            category=data.get("category"),
            is_ai_extracted=bool(data.get("is_ai_extracted", data.get("isAIExtracted", False))),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class GraphLink:
    """Undirected, typed edge between nodes."""

    source: str
    target: str
    type: str
    strength: int = 1
    is_inferred: bool = False

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "strength": self.strength,
            "is_inferred": self.is_inferred,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphLink":
        return cls(
            source=data["source"],
            target=data["target"],
            type=data.get("type", "legal"),
            strength=int(data.get("strength", 1)),
            is_inferred=bool(data.get("is_inferred", data.get("isInferred", False))),
        )


@dataclass
class GraphStats:
    """Aggregate counts over a built graph."""

    total_nodes: int = 0
    total_links: int = 0
    critical_count: int = 0
    high_count: int = 0
    by_type: dict[str, int] = field(default_factory=lambda: {t.value: 0 for t in NodeType})

    @classmethod
    def from_graph(cls, nodes: list[GraphNode], links: list[GraphLink]) -> "GraphStats":
        by_type = {t.value: 0 for t in NodeType}
        for node in nodes:
            by_type[node.type.value] += 1
        return cls(
            total_nodes=len(nodes),
            total_links=len(links),
            critical_count=sum(1 for n in nodes if n.risk_level == RiskLevel.CRITICAL),
            high_count=sum(1 for n in nodes if n.risk_level == RiskLevel.HIGH),
            by_type=by_type,
        )

    def to_dict(self) -> dict:
        return {
            "total_nodes": self.total_nodes,
            "total_links": self.total_links,
            "critical_count": self.critical_count,
            "high_count": self.high_count,
            "by_type": dict(self.by_type),
        }


@dataclass
class GraphData:
    """Output of graph construction."""

    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)
    stats: GraphStats = field(default_factory=GraphStats)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [l.to_dict() for l in self.links],
            "stats": self.stats.to_dict(),
        }


@dataclass
class Cluster:
    """A group of entities joined by strong ties."""

    id: str
    name: str
    entities: list[str]
    color: str
    density: int            # 0-100
    key_entity: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "entities": list(self.entities),
            "color": self.color,
            "density": self.density,
            "key_entity": self.key_entity,
        }


@dataclass
class CentralityResult:
    node_id: str
    degree: int
    betweenness: float
    normalized_score: float

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "degree": self.degree,
            "betweenness": self.betweenness,
            "normalized_score": self.normalized_score,
        }


@dataclass
class Community:
    id: int
    members: list[str]
    color: str

    def to_dict(self) -> dict:
        return {"id": self.id, "members": list(self.members), "color": self.color}


@dataclass
class PathResult:
    path: list[str]
    length: int

    def to_dict(self) -> dict:
        return {"path": list(self.path), "length": self.length}
