from __future__ import annotations

from typing import Callable

import networkx as nx

from lnexplorer.graph.model import GraphSnapshot, LayoutResult, NodePosition

LayoutFn = Callable[[GraphSnapshot], LayoutResult]


def compute_layout(
    snapshot: GraphSnapshot,
    iterations: int = 50,
    seed: int = 42,
    scale: float = 1000.0,
) -> LayoutResult:
    """
    Force-directed (Fruchterman-Reingold) layout of the channel graph.
    One position per node, in snapshot node order.
    """
    if not snapshot.nodes:
        return ()

    g = nx.Graph()
    g.add_nodes_from(snapshot.pub_keys())
    g.add_edges_from((e.node1_pub, e.node2_pub) for e in snapshot.edges)

    pos = nx.spring_layout(g, iterations=iterations, seed=seed, scale=scale)

    return tuple(
        NodePosition(pub_key=n.pub_key, x=float(pos[n.pub_key][0]), y=float(pos[n.pub_key][1]))
        for n in snapshot.nodes
    )


def layout_from_config(iterations: int, seed: int, scale: float) -> LayoutFn:
    def _layout(snapshot: GraphSnapshot) -> LayoutResult:
        return compute_layout(snapshot, iterations=iterations, seed=seed, scale=scale)
    return _layout
