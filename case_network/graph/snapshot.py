"""Headline network figures for reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from case_network.graph.entities import Connection, Entity, EntityCategory


@dataclass
class NetworkSnapshot:
    """Single source of truth for entity/connection totals in reports."""

    entities_total: int
    relationships_total: int
    connections_total: int
    hostile_entities_total: int
    hostile_percentage: str
    hostile_fraction: str
    density: str                    # Average connections per entity
    notes: dict = field(default_factory=dict)

    def stats_labels(self) -> list[dict]:
        """Label/value pairs; graph and database counts are shown apart when they differ."""
        if (
            self.relationships_total != self.connections_total
            and self.relationships_total > 0
            and self.connections_total > 0
        ):
            return [
                {"label": "Connections (Graph)", "value": self.connections_total},
                {"label": "Relationships (DB)", "value": self.relationships_total},
            ]
        effective = max(self.relationships_total, self.connections_total)
        return [{"label": "Connections", "value": effective}]

    def to_dict(self) -> dict:
        return {
            "entities_total": self.entities_total,
            "relationships_total": self.relationships_total,
            "connections_total": self.connections_total,
            "hostile_entities_total": self.hostile_entities_total,
            "hostile_percentage": self.hostile_percentage,
            "hostile_fraction": self.hostile_fraction,
            "density": self.density,
            "notes": dict(self.notes),
        }


def network_snapshot(
    entities: Iterable[Entity],
    connections: Iterable[Connection],
    relationships_total: int = 0,
    case_id: Optional[str] = None,
) -> NetworkSnapshot:
    """Summarize a combined network.

    Args:
        entities: Combined entities
        connections: Combined connections
        relationships_total: Relationship count held elsewhere (e.g. a database)
        case_id: Case the view is scoped to, if any

    Returns:
        NetworkSnapshot
    """
    entity_list = list(entities)
    connection_count = len(list(connections))
    total = len(entity_list)
    hostile = sum(1 for e in entity_list if e.category == EntityCategory.ANTAGONIST)
    effective = max(relationships_total, connection_count)

    if connection_count != relationships_total:
        source = (
            f"Graph snapshot: {connection_count:,} edges; "
            f"Database: {relationships_total:,} relationships"
        )
    else:
        source = f"{connection_count:,} connections"

    return NetworkSnapshot(
        entities_total=total,
        relationships_total=relationships_total,
        connections_total=connection_count,
        hostile_entities_total=hostile,
        hostile_percentage=f"{hostile / total * 100:.1f}" if total else "0",
        hostile_fraction=f"{hostile:,}/{total:,}",
        density=f"{effective * 2 / total:.1f}" if total else "0",
        notes={"filtered_by_case": bool(case_id), "source": source},
    )
