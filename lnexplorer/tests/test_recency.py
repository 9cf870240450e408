from lnexplorer.graph.model import Edge, GraphSnapshot, Node
from lnexplorer.graph.recency import filter_recent

NOW_MS = 1_700_000_000_000
DAY_MS = 86_400_000


def _graph():
    return GraphSnapshot(
        nodes=(
            Node("A", "x", NOW_MS // 1000 - 100_000),
            Node("B", "bob", NOW_MS // 1000 - 10),
            Node("C", "carol", NOW_MS // 1000 - 20),
            Node("D", "dave", "garbage"),
            Node("E", "eve", NOW_MS // 1000 - 30 * 86_400),
        ),
        edges=(
            Edge("A", "B"),
            Edge("B", "C"),
            Edge("C", "D"),
            Edge("B", "E"),
            Edge("B", "Z"),
        ),
    )


def test_protected_alias_survives_even_when_stale():
    snap = GraphSnapshot(nodes=(Node("A", "x", NOW_MS // 1000 - 100_000),), edges=())
    out = filter_recent(snap, 1000, "x", now_ms=NOW_MS)
    assert out.pub_keys() == ["A"]


def test_stale_and_malformed_nodes_are_pruned():
    out = filter_recent(_graph(), DAY_MS, "x", now_ms=NOW_MS)
    assert out.pub_keys() == ["A", "B", "C"]
    assert [(e.node1_pub, e.node2_pub) for e in out.edges] == [("A", "B"), ("B", "C")]


def test_edges_reference_surviving_nodes_only():
    out = filter_recent(_graph(), 7 * DAY_MS, "", now_ms=NOW_MS)
    keys = set(out.pub_keys())
    assert out.edges
    for e in out.edges:
        assert e.node1_pub in keys and e.node2_pub in keys


def test_filter_is_idempotent():
    once = filter_recent(_graph(), DAY_MS, "x", now_ms=NOW_MS)
    twice = filter_recent(once, DAY_MS, "x", now_ms=NOW_MS)
    assert twice == once


def test_input_is_not_mutated():
    g = _graph()
    before = g.to_dict()
    filter_recent(g, 1, "nobody", now_ms=NOW_MS)
    assert g.to_dict() == before


def test_non_positive_ttl_keeps_only_protected_alias():
    g = GraphSnapshot(
        nodes=(Node("A", "x", NOW_MS // 1000), Node("B", "bob", NOW_MS // 1000 + 60)),
        edges=(Edge("A", "B"), Edge("A", "A")),
    )
    out = filter_recent(g, 0, "x", now_ms=NOW_MS)
    assert out.pub_keys() == ["A"]
    assert [(e.node1_pub, e.node2_pub) for e in out.edges] == [("A", "A")]
    assert filter_recent(g, -5, "", now_ms=NOW_MS).nodes == ()


def test_malformed_timestamps_never_raise():
    g = GraphSnapshot(
        nodes=(
            Node("A", "a", None),
            Node("B", "b", True),
            Node("C", "c", {"nested": 1}),
            Node("D", "d", float("nan")),
            Node("E", "e", str(NOW_MS // 1000)),
        ),
    )
    out = filter_recent(g, DAY_MS, None, now_ms=NOW_MS)
    assert out.pub_keys() == ["E"]


def test_empty_alias_matches_nothing():
    g = GraphSnapshot(nodes=(Node("A", "", None),))
    assert filter_recent(g, DAY_MS, "", now_ms=NOW_MS).nodes == ()
