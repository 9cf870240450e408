from __future__ import annotations

import math
import time
from typing import Any, Optional, Set

from lnexplorer.graph.model import GraphSnapshot, Node


def _seconds(value: Any) -> Optional[float]:
    """Best-effort unix seconds; None for anything that is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return out if math.isfinite(out) else None


def is_recent(node: Node, ttl_ms: float, protected_alias: Optional[str], now_ms: float) -> bool:
    if protected_alias and node.alias == protected_alias:
        return True
    if ttl_ms <= 0:
        return False
    seen = _seconds(node.last_update)
    if seen is None:
        return False
    return now_ms - seen * 1000 <= ttl_ms


def filter_recent(
    snapshot: GraphSnapshot,
    ttl_ms: float,
    protected_alias: Optional[str],
    now_ms: Optional[float] = None,
) -> GraphSnapshot:
    """
    Reduce a graph to nodes seen within `ttl_ms` (or carrying `protected_alias`)
    and to edges whose both endpoints survive. The input is never modified.
    """
    if now_ms is None:
        now_ms = time.time() * 1000

    keep: Set[str] = {n.pub_key for n in snapshot.nodes if is_recent(n, ttl_ms, protected_alias, now_ms)}

    return GraphSnapshot(
        nodes=tuple(n for n in snapshot.nodes if n.pub_key in keep),
        edges=tuple(e for e in snapshot.edges if e.node1_pub in keep and e.node2_pub in keep),
    )
