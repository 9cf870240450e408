from lnexplorer.graph.model import GraphSnapshot, LayoutResult, NodePosition

# Reference "now" for fixtures/graph.json: bob and carol are about a day old,
# explorer is years stale, dave has a malformed timestamp.
FIXTURE_NOW_S = 1700000100 + 86400


def index_layout(snapshot: GraphSnapshot) -> LayoutResult:
    """Cheap deterministic stand-in for the force-directed layout."""
    return tuple(NodePosition(n.pub_key, float(i), float(-i)) for i, n in enumerate(snapshot.nodes))
