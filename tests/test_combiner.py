"""Tests for entity combination and connection inference."""

from case_network.graph.combiner import (
    EntityCombiner,
    combine,
    infer_category,
    inferred_connection_type,
    map_entity_type,
)
from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
    ExtractedEntity,
    TimelineEvent,
)
from case_network.graph.matching import is_mentioned, mentioned_entities, name_tokens


def test_static_entities_kept_and_marked():
    """Test curated entities are kept and never flagged as extracted."""
    static = [Entity(id="p1", name="Alice", is_ai_extracted=True)]
    result = combine(static, [])

    assert [e.id for e in result.entities] == ["p1"]
    assert result.entities[0].is_ai_extracted is False
    assert result.ai_entity_count == 0


def test_dedup_by_case_insensitive_name():
    """Test no two combined entities share a name ignoring case."""
    static = [Entity(id="p1", name="Alice Khan")]
    extracted = [
        ExtractedEntity(id="1", name="alice khan"),
        ExtractedEntity(id="2", name="  ALICE KHAN "),
        ExtractedEntity(id="3", name="Bob"),
        ExtractedEntity(id="4", name="bob"),
    ]
    result = combine(static, [], extracted)

    names = [e.name.strip().lower() for e in result.entities]
    assert len(names) == len(set(names))
    assert [e.id for e in result.entities] == ["p1", "ai-3"]


def test_extracted_entity_conversion():
    """Test extracted entity ids, types and default text."""
    extracted = [ExtractedEntity(id="7", name="Punjab Police", entity_type="Official Body")]
    entity = combine([], [], extracted).entities[0]

    assert entity.id == "ai-7"
    assert entity.type == EntityType.AGENCY
    assert entity.is_ai_extracted is True
    assert entity.role == "Unknown Role"
    assert entity.description == "AI-extracted entity"


def test_extracted_category_inference():
    """Test category keywords and explicit categories."""
    extracted = [
        ExtractedEntity(id="1", name="A", role="Victim of harassment"),
        ExtractedEntity(id="2", name="B", role="Complainant"),
        ExtractedEntity(id="3", name="C", description="Sessions court judge"),
        ExtractedEntity(id="4", name="D", role="Witness"),
        ExtractedEntity(id="5", name="E", role="Victim", category="antagonist"),
    ]
    categories = [e.category for e in combine([], [], extracted).entities]

    assert categories == [
        EntityCategory.PROTAGONIST,
        EntityCategory.ANTAGONIST,
        EntityCategory.OFFICIAL,
        EntityCategory.NEUTRAL,
        EntityCategory.ANTAGONIST,
    ]


def test_infer_category_precedence():
    """Test protagonist keywords are checked before antagonist ones."""
    assert infer_category("Accused, later acquitted", None) == EntityCategory.PROTAGONIST
    assert infer_category(None, "Filed an FIR") == EntityCategory.OFFICIAL
    assert infer_category(None, None) == EntityCategory.NEUTRAL


def test_map_entity_type():
    """Test extraction labels map onto entity types."""
    assert map_entity_type("Organization") == EntityType.ORGANIZATION
    assert map_entity_type("Legal Entity") == EntityType.LEGAL
    assert map_entity_type("Spaceship") == EntityType.PERSON
    assert map_entity_type(None) == EntityType.PERSON


def test_case_filter_drops_baseline():
    """Test an active case filter starts from an empty baseline."""
    static = [Entity(id="p1", name="Alice"), Entity(id="p2", name="Bob")]
    connections = [Connection(source="p1", target="p2", strength=5)]
    extracted = [ExtractedEntity(id="1", name="Alice")]

    result = combine(static, connections, extracted, case_filter_active=True)

    assert [e.id for e in result.entities] == ["ai-1"]
    assert result.connections == []


def test_static_connection_with_unknown_endpoint_dropped():
    """Test curated connections must reference combined entities."""
    static = [Entity(id="p1", name="Alice")]
    connections = [Connection(source="p1", target="ghost", strength=5)]
    assert combine(static, connections).connections == []


def test_inferred_connections_from_event():
    """Test co-mentioned entities are connected with inferred edges."""
    static = [Entity(id="p1", name="Alice Khan"), Entity(id="p2", name="Bob Shah")]
    events = [
        TimelineEvent(
            category="Business",
            description="Signed a supply contract with a vendor in Lahore",
            individuals="Alice and Bob",
        )
    ]
    result = combine(static, [], extracted_events=events)

    assert len(result.connections) == 1
    conn = result.connections[0]
    assert (conn.source, conn.target) == ("p1", "p2")
    assert conn.type == ConnectionType.PROFESSIONAL
    assert conn.strength == 2
    assert conn.is_inferred is True
    assert conn.relationship == "Mentioned in: Signed a supply contract with ..."
    assert result.inferred_connection_count == 1


def test_inference_respects_existing_connection_either_direction():
    """Test no duplicate edge is inferred for a pair already connected as (b, a)."""
    static = [Entity(id="p1", name="Alice"), Entity(id="p2", name="Bob")]
    connections = [Connection(source="p2", target="p1", type=ConnectionType.FAMILY, strength=5)]
    events = [
        TimelineEvent(category="Harassment", description="x", individuals="Alice, Bob"),
        TimelineEvent(category="Harassment", description="y", individuals="Bob, Alice"),
    ]
    result = combine(static, connections, extracted_events=events)

    assert len(result.connections) == 1
    assert result.connections[0].is_inferred is False


def test_inference_single_mention_adds_nothing():
    """Test an event naming one entity infers no connection."""
    static = [Entity(id="p1", name="Alice"), Entity(id="p2", name="Bob")]
    events = [TimelineEvent(individuals="Alice alone")]
    assert combine(static, [], extracted_events=events).connections == []


def test_inferred_strength_is_configurable():
    """Test combiner parameters flow into inferred connections."""
    combiner = EntityCombiner(inferred_strength=4, relationship_preview_chars=5)
    static = [Entity(id="p1", name="Alice"), Entity(id="p2", name="Bob")]
    events = [TimelineEvent(description="Hearing adjourned", individuals="Alice, Bob")]

    conn = combiner.combine(static, [], extracted_events=events).connections[0]
    assert conn.strength == 4
    assert conn.relationship == "Mentioned in: Heari..."
    assert conn.type == ConnectionType.LEGAL


def test_inferred_connection_type_mapping():
    """Test event categories map onto connection types."""
    assert inferred_connection_type("Family Dispute") == ConnectionType.ADVERSARIAL
    assert inferred_connection_type("Harassment") == ConnectionType.ADVERSARIAL
    assert inferred_connection_type("Government Order") == ConnectionType.OFFICIAL
    assert inferred_connection_type("Legal Proceeding") == ConnectionType.LEGAL
    assert inferred_connection_type(None) == ConnectionType.LEGAL


def test_name_matching_helpers():
    """Test first/last token substring matching."""
    assert name_tokens("  Danish   Thanvi ") == ("danish", "thanvi")
    assert name_tokens("") == ("", "")
    assert is_mentioned("mr. thanvi appeared", "Danish Thanvi")
    assert not is_mentioned("", "Danish Thanvi")
    assert not is_mentioned("anyone", "   ")

    entities = [Entity(id="a", name="Ali Raza"), Entity(id="b", name="Sara")]
    # Substring matching: "ali" also matches inside "khalid"
    assert mentioned_entities("Khalid and Sara", entities) == ["a", "b"]
