"""Tests for Union-Find clustering."""

from case_network.graph.clustering import (
    CLUSTER_COLORS,
    UnionFind,
    cluster_density,
    cluster_entities,
    generate_cluster_name,
)
from case_network.graph.entities import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
)


def _people(*ids, **kwargs):
    return [Entity(id=i, name=i.upper(), **kwargs) for i in ids]


def test_union_find_basics():
    """Test union, find and path compression."""
    uf = UnionFind(["a", "b", "c", "d"])
    uf.union("a", "b")
    uf.union("c", "d")
    assert uf.connected("a", "b")
    assert not uf.connected("a", "c")

    uf.union("b", "d")
    root = uf.find("a")
    assert all(uf.find(x) == root for x in "abcd")
    assert all(uf.parent[x] == root for x in "abcd")


def test_union_find_unknown_element_becomes_singleton():
    """Test find adds unknown elements lazily."""
    uf = UnionFind()
    assert "z" not in uf
    assert uf.find("z") == "z"
    assert "z" in uf


def test_strong_chain_forms_one_cluster():
    """Test A-B and B-C at strength 5 cluster together with threshold 3."""
    entities = _people("a", "b", "c")
    connections = [
        Connection(source="a", target="b", strength=5),
        Connection(source="b", target="c", strength=5),
    ]
    clusters = cluster_entities(entities, connections, min_connection_strength=3)

    assert len(clusters) == 1
    assert sorted(clusters[0].entities) == ["a", "b", "c"]


def test_threshold_above_strength_gives_no_clusters():
    """Test threshold 6 leaves three singletons and therefore no clusters."""
    entities = _people("a", "b", "c")
    connections = [
        Connection(source="a", target="b", strength=5),
        Connection(source="b", target="c", strength=5),
    ]
    assert cluster_entities(entities, connections, min_cluster_size=2, min_connection_strength=6) == []


def test_alice_bob_cluster_falls_back_to_entity_cluster(alice_bob):
    """Test adversarial dominance needs more than two antagonists."""
    entities, connections = alice_bob
    clusters = cluster_entities(entities, connections)

    assert len(clusters) == 1
    cluster = clusters[0]
    assert cluster.entities == ["p1", "p2"]
    assert cluster.name == "Entity Cluster"
    assert cluster.id == "cluster-0"
    assert cluster.color == CLUSTER_COLORS[0]
    assert cluster.density == 100
    assert cluster.key_entity == "p1"


def test_clusters_sorted_by_size():
    """Test larger clusters come first; ids keep discovery order."""
    entities = _people("a", "b", "c", "d", "e")
    connections = [
        Connection(source="a", target="b", strength=3),
        Connection(source="c", target="d", strength=3),
        Connection(source="d", target="e", strength=3),
    ]
    clusters = cluster_entities(entities, connections)

    assert [len(c.entities) for c in clusters] == [3, 2]
    assert clusters[0].id == "cluster-1"
    assert clusters[1].id == "cluster-0"


def test_weak_connections_ignored_for_union_but_counted_for_key_entity():
    """Test key entity uses every connection, not just strong ones."""
    entities = _people("a", "b", "c", "d")
    connections = [
        Connection(source="a", target="b", strength=5),
        Connection(source="b", target="c", strength=1),
        Connection(source="b", target="d", strength=1),
    ]
    clusters = cluster_entities(entities, connections)

    assert len(clusters) == 1
    assert clusters[0].entities == ["a", "b"]
    assert clusters[0].key_entity == "b"


def test_key_entity_tie_keeps_first_member():
    """Test ties on connection count go to the first member."""
    entities = _people("a", "b")
    clusters = cluster_entities(entities, [Connection(source="b", target="a", strength=4)])
    assert clusters[0].key_entity == "a"


def test_unknown_endpoints_ignored():
    """Test connections to absent entities never create members."""
    entities = _people("a", "b")
    connections = [Connection(source="a", target="ghost", strength=9)]
    assert cluster_entities(entities, connections) == []


def test_empty_input():
    """Test no entities yield no clusters."""
    assert cluster_entities([], []) == []


def test_cluster_density():
    """Test density counts distinct internal pairs, rounded half up."""
    connections = [
        Connection(source="a", target="b"),
        Connection(source="b", target="a"),
        Connection(source="b", target="c"),
        Connection(source="c", target="x"),
    ]
    # 2 distinct pairs of 3 possible
    assert cluster_density({"a", "b", "c"}, connections) == 67
    assert cluster_density({"a"}, connections) == 0
    # 3 of 120 pairs -> 2.5 rounds up
    members = {f"m{i}" for i in range(16)}
    pairs = [Connection(source="m0", target=f"m{i}") for i in (1, 2, 3)]
    assert cluster_density(members, pairs) == 3
    assert cluster_density({"a", "b", "c", "d", "e"}, [Connection(source="a", target="b")]) == 10


def test_cluster_name_precedence():
    """Test the naming decision table, first match wins."""
    family = [Connection(source="a", target="b", type=ConnectionType.FAMILY)]
    adversarial = [
        Connection(source="a", target="b", type=ConnectionType.ADVERSARIAL),
        Connection(source="b", target="c", type=ConnectionType.ADVERSARIAL),
    ]
    legal = [Connection(source="a", target="b", type=ConnectionType.LEGAL)]
    professional = [Connection(source="a", target="b", type=ConnectionType.PROFESSIONAL)]

    people = _people("a", "b", "c")
    antagonists = _people("a", "b", "c", category=EntityCategory.ANTAGONIST)
    officials = _people("a", "b", "c", category=EntityCategory.OFFICIAL)
    officials[0].type = EntityType.AGENCY
    with_org = _people("a", "b") + [Entity(id="c", name="C", type=EntityType.ORGANIZATION)]

    assert generate_cluster_name(antagonists, family) == "Family Network"
    assert generate_cluster_name(antagonists, adversarial) == "Conspiracy Network"
    assert generate_cluster_name(officials, legal) == "Institutional Network"
    assert generate_cluster_name(with_org, legal) == "Business Network"
    assert generate_cluster_name(people, legal) == "Legal Proceedings"
    assert generate_cluster_name(people, professional) == "Professional Network"
    assert generate_cluster_name(people, adversarial) == "Entity Cluster"
    assert generate_cluster_name(people, []) == "Entity Cluster"
