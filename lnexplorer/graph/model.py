from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple


class GraphFormatError(ValueError):
    """Raw graph payload does not have the {nodes, edges} shape."""


NODE_CORE_FIELDS = ("pub_key", "alias", "last_update")
EDGE_CORE_FIELDS = ("node1_pub", "node2_pub")


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise GraphFormatError(f"{what} must be a JSON object, got {type(raw).__name__}")
    return raw


@dataclass(frozen=True)
class Node:
    """
    A Lightning node as announced in the graph.

    last_update is kept exactly as the daemon supplied it (normally unix seconds);
    anything else the daemon sends lives untouched in `extra`.
    """
    pub_key: str
    alias: str = ""
    last_update: Any = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_dict(raw: Any) -> "Node":
        obj = _require_mapping(raw, "node")
        if "pub_key" not in obj:
            raise GraphFormatError("node is missing 'pub_key'")
        alias = obj.get("alias")
        return Node(
            pub_key=str(obj["pub_key"]),
            alias="" if alias is None else str(alias),
            last_update=obj.get("last_update"),
            extra={k: v for k, v in obj.items() if k not in NODE_CORE_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pub_key": self.pub_key,
            "alias": self.alias,
            "last_update": self.last_update,
            **self.extra,
        }


@dataclass(frozen=True)
class Edge:
    node1_pub: str
    node2_pub: str
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_dict(raw: Any) -> "Edge":
        obj = _require_mapping(raw, "edge")
        for k in EDGE_CORE_FIELDS:
            if k not in obj:
                raise GraphFormatError(f"edge is missing '{k}'")
        return Edge(
            node1_pub=str(obj["node1_pub"]),
            node2_pub=str(obj["node2_pub"]),
            extra={k: v for k, v in obj.items() if k not in EDGE_CORE_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"node1_pub": self.node1_pub, "node2_pub": self.node2_pub, **self.extra}


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    @staticmethod
    def empty() -> "GraphSnapshot":
        return GraphSnapshot()

    @staticmethod
    def from_dict(raw: Any) -> "GraphSnapshot":
        obj = _require_mapping(raw, "graph")
        nodes = obj.get("nodes")
        edges = obj.get("edges")
        # lnd omits empty repeated fields
        nodes = [] if nodes is None else nodes
        edges = [] if edges is None else edges
        if not isinstance(nodes, list) or not isinstance(edges, list):
            raise GraphFormatError("graph 'nodes' and 'edges' must be lists")
        return GraphSnapshot(
            nodes=tuple(Node.from_dict(n) for n in nodes),
            edges=tuple(Edge.from_dict(e) for e in edges),
        )

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def pub_keys(self) -> List[str]:
        return [n.pub_key for n in self.nodes]


@dataclass(frozen=True)
class NodePosition:
    pub_key: str
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"pub_key": self.pub_key, "x": self.x, "y": self.y}


# Positions in the node order of the snapshot they were computed from.
LayoutResult = Tuple[NodePosition, ...]
