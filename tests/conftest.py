"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from case_network.config_loader import CONFIG_ENV_VAR
from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
)
from case_network.graph.models import GraphLink, GraphNode, NodeType, RiskLevel

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch):
    """Keep CASE_NETWORK_* environment overrides from leaking into tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Return path to config.yaml."""
    return project_root / "config" / "config.yaml"


@pytest.fixture
def make_node():
    """Factory for bare graph nodes."""
    def _make(node_id: str, node_type: NodeType = NodeType.PERSON, **metadata) -> GraphNode:
        return GraphNode(
            id=node_id,
            name=node_id,
            type=node_type,
            risk_level=RiskLevel.LOW,
            metadata=dict(metadata),
        )
    return _make


@pytest.fixture
def make_graph(make_node):
    """Factory building (nodes, links) from node ids and (source, target) pairs."""
    def _make(node_ids, edges):
        nodes = [make_node(node_id) for node_id in node_ids]
        links = [GraphLink(source=s, target=t, type="legal") for s, t in edges]
        return nodes, links
    return _make


@pytest.fixture
def path_graph(make_graph):
    """A-B-C-D-E path graph."""
    return make_graph(
        ["A", "B", "C", "D", "E"],
        [("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")],
    )


@pytest.fixture
def alice_bob():
    """Two persons joined by one strong adversarial connection."""
    entities = [
        Entity(id="p1", name="Alice", category=EntityCategory.ANTAGONIST),
        Entity(id="p2", name="Bob", category=EntityCategory.PROTAGONIST),
    ]
    connections = [
        Connection(source="p1", target="p2", type=ConnectionType.ADVERSARIAL, strength=5),
    ]
    return entities, connections


@pytest.fixture
def case_entities():
    """A small curated baseline with people, an agency and a company."""
    return [
        Entity(id="danish-thanvi", name="Danish Thanvi", role="Accused",
               category=EntityCategory.PROTAGONIST),
        Entity(id="saqib-mumtaz", name="Saqib Mumtaz", role="Complainant",
               category=EntityCategory.ANTAGONIST),
        Entity(id="fia", name="FIA", type=EntityType.AGENCY, role="Investigating agency",
               category=EntityCategory.OFFICIAL),
        Entity(id="bcg", name="BCG Pakistan", type=EntityType.ORGANIZATION, role="Employer"),
    ]


@pytest.fixture
def case_bundle() -> dict:
    """A raw record bundle as a client would post it, with camelCase keys."""
    return {
        "staticEntities": [
            {"id": "p1", "name": "Alice", "type": "person", "category": "antagonist"},
            {"id": "p2", "name": "Bob", "type": "person", "category": "protagonist"},
            {"id": "o1", "name": "Acme Corp", "type": "organization", "category": "neutral"},
        ],
        "staticConnections": [
            {"source": "p1", "target": "p2", "type": "adversarial", "strength": 5},
            {"source": "p2", "target": "o1", "type": "professional", "strength": 3},
        ],
        "extractedEntities": [
            {"id": "e1", "name": "Carol Diaz", "type": "Official Body",
             "role": "District Judge", "description": "Presided over the hearing"},
        ],
        "extractedEvents": [
            {"date": "2023-03-01", "category": "Legal Proceeding",
             "description": "Bail hearing before the district court",
             "individuals": "Alice, Carol Diaz"},
        ],
        "staticEvents": [
            {"date": "2022-05-10", "category": "Harassment",
             "description": "Threatening messages sent to Bob", "individuals": "Alice, Bob"},
        ],
        "discrepancies": [
            {"id": "d1", "title": "Missing seizure memo", "severity": "High"},
        ],
        "violations": [],
    }
