"""Entity, connection and source-record data models for the case network."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class EntityType(str, Enum):
    """Kinds of actors tracked in an investigation."""
    PERSON = "person"
    ORGANIZATION = "organization"
    AGENCY = "agency"
    LEGAL = "legal"


class EntityCategory(str, Enum):
    """Narrative role of an entity within the case."""
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    OFFICIAL = "official"
    NEUTRAL = "neutral"


class ConnectionType(str, Enum):
    """Types of relationships between entities."""
    FAMILY = "family"
    PROFESSIONAL = "professional"
    ADVERSARIAL = "adversarial"
    OFFICIAL = "official"
    LEGAL = "legal"


def coerce_enum(enum_cls, value: Any, default):
    """Return ``enum_cls(value)``, or ``default`` for missing/unknown values."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return default
    return default


def pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among ``keys``.

    Source records arrive with either camelCase or snake_case keys.
    """
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _required_text(data: dict, *keys: str) -> str:
    value = pick(data, *keys)
    if value is None or not str(value).strip():
        raise ValueError(f"Record is missing required field {keys[0]!r}")
    return str(value)


@dataclass
class Entity:
    """A person, organization, agency or legal actor."""

    id: str
    name: str
    type: EntityType = EntityType.PERSON
    role: Optional[str] = None
    description: Optional[str] = None
    category: EntityCategory = EntityCategory.NEUTRAL
    is_ai_extracted: bool = False
    related_event_ids: list[str] = field(default_factory=list)
    source_upload_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "role": self.role,
            "description": self.description,
            "category": self.category.value,
            "is_ai_extracted": self.is_ai_extracted,
            "related_event_ids": list(self.related_event_ids),
            "source_upload_id": self.source_upload_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entity":
        """Create from dictionary.

        Raises:
            ValueError: If ``id`` or ``name`` is missing
        """
        return cls(
            id=_required_text(data, "id"),
            name=_required_text(data, "name"),
            type=coerce_enum(EntityType, data.get("type"), EntityType.PERSON),
            role=data.get("role"),
            description=data.get("description"),
            category=coerce_enum(EntityCategory, data.get("category"), EntityCategory.NEUTRAL),
            is_ai_extracted=bool(pick(data, "is_ai_extracted", "isAIExtracted", default=False)),
            related_event_ids=list(pick(data, "related_event_ids", "relatedEventIds", default=[])),
            source_upload_id=pick(data, "source_upload_id", "sourceUploadId"),
        )


@dataclass
class Connection:
    """An undirected, weighted relationship between two entities."""

    source: str
    target: str
    type: ConnectionType = ConnectionType.LEGAL
    strength: int = 1
    relationship: str = ""
    is_inferred: bool = False

    @property
    def key(self) -> frozenset:
        """Direction-free identity: (a, b) and (b, a) share a key."""
        return frozenset((self.source, self.target))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
            "strength": self.strength,
            "relationship": self.relationship,
            "is_inferred": self.is_inferred,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Connection":
        """Create from dictionary.

        Raises:
            ValueError: If an endpoint is missing or strength is not a positive integer
        """
        strength = int(data.get("strength", 1))
        if strength < 1:
            raise ValueError(f"Connection strength must be positive, got {strength}")
        return cls(
            source=_required_text(data, "source"),
            target=_required_text(data, "target"),
            type=coerce_enum(ConnectionType, data.get("type"), ConnectionType.LEGAL),
            strength=strength,
            relationship=data.get("relationship") or "",
            is_inferred=bool(pick(data, "is_inferred", "isInferred", default=False)),
        )


@dataclass
class ExtractedEntity:
    """An entity produced by document analysis, before combination."""

    id: str
    name: str
    entity_type: str = "Person"     # Person | Organization | Official Body | Legal Entity
    role: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    related_event_ids: list[str] = field(default_factory=list)
    source_upload_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "entity_type": self.entity_type,
            "role": self.role,
            "description": self.description,
            "category": self.category,
            "related_event_ids": list(self.related_event_ids),
            "source_upload_id": self.source_upload_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractedEntity":
        """Create from dictionary."""
        return cls(
            id=_required_text(data, "id"),
            name=_required_text(data, "name"),
            entity_type=pick(data, "entity_type", "entityType", "type", default="Person"),
            role=data.get("role"),
            description=data.get("description"),
            category=data.get("category"),
            related_event_ids=list(pick(data, "related_event_ids", "relatedEventIds", default=[])),
            source_upload_id=pick(data, "source_upload_id", "sourceUploadId"),
        )


@dataclass
class TimelineEvent:
    """A dated case event, either curated or extracted from documents."""

    date: str = ""                  # ISO date string as supplied
    category: str = ""              # e.g. "Harassment", "Legal Proceeding"
    description: str = ""
    individuals: str = ""           # Free text naming the people involved
    outcome: str = ""
    legal_action: str = ""
    id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "date": self.date,
            "category": self.category,
            "description": self.description,
            "individuals": self.individuals,
            "outcome": self.outcome,
            "legal_action": self.legal_action,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TimelineEvent":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            date=str(data.get("date") or ""),
            category=data.get("category") or "",
            description=data.get("description") or "",
            individuals=data.get("individuals") or "",
            outcome=data.get("outcome") or "",
            legal_action=pick(data, "legal_action", "legalAction", default=""),
        )


@dataclass
class Discrepancy:
    """An evidentiary or procedural discrepancy found in the record."""

    id: str
    title: str
    description: str = ""
    severity: str = "low"
    discrepancy_type: str = "Other"
    legal_reference: Optional[str] = None
    related_dates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "discrepancy_type": self.discrepancy_type,
            "legal_reference": self.legal_reference,
            "related_dates": list(self.related_dates),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Discrepancy":
        """Create from dictionary."""
        return cls(
            id=_required_text(data, "id"),
            title=_required_text(data, "title"),
            description=data.get("description") or "",
            severity=str(data.get("severity") or "low").lower(),
            discrepancy_type=pick(data, "discrepancy_type", "discrepancyType", default="Other"),
            legal_reference=pick(data, "legal_reference", "legalReference"),
            related_dates=list(pick(data, "related_dates", "relatedDates", default=[])),
        )
