"""Merge curated case entities with AI-extracted ones and infer connections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
    ExtractedEntity,
    TimelineEvent,
    coerce_enum,
)
from case_network.graph.matching import mentioned_entities

logger = logging.getLogger(__name__)

AI_ID_PREFIX = "ai-"

EXTRACTED_TYPE_MAP: dict[str, EntityType] = {
    "Person": EntityType.PERSON,
    "Organization": EntityType.ORGANIZATION,
    "Official Body": EntityType.AGENCY,
    "Legal Entity": EntityType.LEGAL,
}

# Checked in order; the first category with a matching keyword wins
CATEGORY_KEYWORDS: tuple[tuple[EntityCategory, tuple[str, ...]], ...] = (
    (EntityCategory.PROTAGONIST, ("victim", "acquit", "target")),
    (EntityCategory.ANTAGONIST, ("accus", "compla", "corrupt", "illeg")),
    (EntityCategory.OFFICIAL, ("judge", "court", "fir", "agency")),
)

# Event category keyword -> inferred connection type, checked in order
EVENT_CONNECTION_TYPES: tuple[tuple[tuple[str, ...], ConnectionType], ...] = (
    (("family", "harassment"), ConnectionType.ADVERSARIAL),
    (("business",), ConnectionType.PROFESSIONAL),
    (("official", "government"), ConnectionType.OFFICIAL),
)


def map_entity_type(source_type: Optional[str]) -> EntityType:
    """Map an extraction label ("Official Body", ...) to an EntityType."""
    return EXTRACTED_TYPE_MAP.get((source_type or "").strip(), EntityType.PERSON)


def infer_category(role: Optional[str], description: Optional[str]) -> EntityCategory:
    """Infer a narrative category from role and description keywords."""
    text = f"{role or ''} {description or ''}".lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return EntityCategory.NEUTRAL


def inferred_connection_type(event_category: Optional[str]) -> ConnectionType:
    """Derive the connection type for entities co-mentioned in an event."""
    category = (event_category or "").lower()
    for keywords, connection_type in EVENT_CONNECTION_TYPES:
        if any(keyword in category for keyword in keywords):
            return connection_type
    return ConnectionType.LEGAL


@dataclass
class CombinedNetwork:
    """Combined entity and connection sets."""

    entities: list[Entity] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)

    @property
    def ai_entity_count(self) -> int:
        return sum(1 for e in self.entities if e.is_ai_extracted)

    @property
    def inferred_connection_count(self) -> int:
        return sum(1 for c in self.connections if c.is_inferred)

    def to_dict(self) -> dict:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "connections": [c.to_dict() for c in self.connections],
            "ai_entity_count": self.ai_entity_count,
            "inferred_connection_count": self.inferred_connection_count,
        }


class EntityCombiner:
    """
    Combine a curated baseline with extracted entities.

    - Baseline entities/connections are kept unless a case filter is active
    - Extracted entities are added unless their name already exists
      (case-insensitive)
    - Entities co-mentioned in an extracted event are connected by an
      inferred connection unless already connected in either direction

    Inference is O(events x entities^2) in the worst case.
    """

    def __init__(self, inferred_strength: int = 2, relationship_preview_chars: int = 30):
        """Initialize combiner.

        Args:
            inferred_strength: Strength assigned to inferred connections
            relationship_preview_chars: Event description prefix length used
                in inferred relationship text
        """
        self.inferred_strength = inferred_strength
        self.relationship_preview_chars = relationship_preview_chars

    def combine(
        self,
        static_entities: Iterable[Entity],
        static_connections: Iterable[Connection],
        extracted_entities: Iterable[ExtractedEntity] = (),
        extracted_events: Iterable[TimelineEvent] = (),
        case_filter_active: bool = False,
    ) -> CombinedNetwork:
        """Build the combined entity and connection lists.

        Args:
            static_entities: Curated baseline entities
            static_connections: Curated baseline connections
            extracted_entities: AI-extracted entities
            extracted_events: AI-extracted events used for connection inference
            case_filter_active: Case-scoped views start from an empty baseline

        Returns:
            CombinedNetwork with entities and connections
        """
        entities: list[Entity] = []
        seen_names: set[str] = set()
        seen_ids: set[str] = set()

        if not case_filter_active:
            for entity in static_entities:
                self._add_entity(entities, seen_names, seen_ids, self._as_static(entity))

        for extracted in extracted_entities:
            converted = self._convert_extracted(extracted)
            if converted is not None:
                self._add_entity(entities, seen_names, seen_ids, converted)

        connections: list[Connection] = []
        existing: set[frozenset] = set()
        if not case_filter_active:
            for conn in static_connections:
                if conn.source not in seen_ids or conn.target not in seen_ids:
                    logger.debug(f"Dropping connection {conn.source}->{conn.target}: unknown endpoint")
                    continue
                connections.append(self._as_static_connection(conn))
                existing.add(conn.key)

        inferred = 0
        for event in extracted_events:
            inferred += self._infer_from_event(event, entities, connections, existing)

        logger.debug(
            f"Combined network: {len(entities)} entities, {len(connections)} connections "
            f"({inferred} inferred)"
        )
        return CombinedNetwork(entities=entities, connections=connections)

    # ========== Entities ==========

    @staticmethod
    def _add_entity(
        entities: list[Entity],
        seen_names: set[str],
        seen_ids: set[str],
        entity: Entity,
    ) -> None:
        if not entity.id or not entity.name or not entity.name.strip():
            logger.debug(f"Skipping malformed entity record: {entity!r}")
            return
        name_key = entity.name.strip().lower()
        if name_key in seen_names or entity.id in seen_ids:
            return
        entities.append(entity)
        seen_names.add(name_key)
        seen_ids.add(entity.id)

    @staticmethod
    def _as_static(entity: Entity) -> Entity:
        return Entity(
            id=entity.id,
            name=entity.name,
            type=entity.type,
            role=entity.role,
            description=entity.description,
            category=entity.category,
            is_ai_extracted=False,
            related_event_ids=list(entity.related_event_ids),
            source_upload_id=entity.source_upload_id,
        )

    @staticmethod
    def _as_static_connection(conn: Connection) -> Connection:
        return Connection(
            source=conn.source,
            target=conn.target,
            type=conn.type,
            strength=conn.strength,
            relationship=conn.relationship,
            is_inferred=False,
        )

    @staticmethod
    def _convert_extracted(extracted: ExtractedEntity) -> Optional[Entity]:
        if not extracted.id or not extracted.name or not extracted.name.strip():
            logger.debug(f"Skipping malformed extracted entity: {extracted!r}")
            return None

        category = coerce_enum(EntityCategory, extracted.category, None)
        if category is None:
            category = infer_category(extracted.role, extracted.description)

        return Entity(
            id=f"{AI_ID_PREFIX}{extracted.id}",
            name=extracted.name,
            type=map_entity_type(extracted.entity_type),
            role=extracted.role or "Unknown Role",
            description=extracted.description or "AI-extracted entity",
            category=category,
            is_ai_extracted=True,
            related_event_ids=list(extracted.related_event_ids or []),
            source_upload_id=extracted.source_upload_id,
        )

    # ========== Connection inference ==========

    def _infer_from_event(
        self,
        event: TimelineEvent,
        entities: list[Entity],
        connections: list[Connection],
        existing: set[frozenset],
    ) -> int:
        mentioned = mentioned_entities(event.individuals, entities)
        if len(mentioned) < 2:
            return 0

        connection_type = inferred_connection_type(event.category)
        preview = (event.description or "")[: self.relationship_preview_chars]
        added = 0
        for i, source in enumerate(mentioned):
            for target in mentioned[i + 1:]:
                key = frozenset((source, target))
                if key in existing:
                    continue
                connections.append(
                    Connection(
                        source=source,
                        target=target,
                        type=connection_type,
                        strength=self.inferred_strength,
                        relationship=f"Mentioned in: {preview}...",
                        is_inferred=True,
                    )
                )
                existing.add(key)
                added += 1
        return added


def combine(
    static_entities: Iterable[Entity],
    static_connections: Iterable[Connection],
    extracted_entities: Iterable[ExtractedEntity] = (),
    extracted_events: Iterable[TimelineEvent] = (),
    case_filter_active: bool = False,
) -> CombinedNetwork:
    """Combine with default inference parameters."""
    return EntityCombiner().combine(
        static_entities,
        static_connections,
        extracted_entities,
        extracted_events,
        case_filter_active,
    )
