import pytest

from lnexplorer.graph.model import GraphFormatError, GraphSnapshot


def test_daemon_fields_pass_through_untouched():
    raw = {
        "nodes": [{"last_update": 1, "pub_key": "A", "alias": "a", "color": "#fff", "features": {"9": {"name": "x"}}}],
        "edges": [{"channel_id": "7", "node1_pub": "A", "node2_pub": "B", "node1_policy": None}],
    }
    snap = GraphSnapshot.from_dict(raw)
    assert snap.nodes[0].extra == {"color": "#fff", "features": {"9": {"name": "x"}}}
    assert snap.to_dict() == raw


def test_missing_lists_mean_empty_graph():
    assert GraphSnapshot.from_dict({}) == GraphSnapshot.empty()


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"nodes": "nope", "edges": []},
        {"nodes": [{"alias": "no key"}], "edges": []},
        {"nodes": [], "edges": [{"node1_pub": "A"}]},
        {"nodes": [42], "edges": []},
    ],
)
def test_malformed_graph_is_rejected(raw):
    with pytest.raises(GraphFormatError):
        GraphSnapshot.from_dict(raw)
