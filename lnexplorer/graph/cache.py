from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from lnexplorer.graph.model import GraphSnapshot, LayoutResult


class LayoutMismatchError(ValueError):
    """Positions were not computed from the snapshot they are paired with."""


@dataclass(frozen=True)
class CacheState:
    graphdata: GraphSnapshot
    graphpos: LayoutResult
    generation: int = 0
    updated_at: Optional[float] = None

    def graph_json(self) -> Dict[str, Any]:
        return self.graphdata.to_dict()

    def graph_with_positions_json(self) -> Dict[str, Any]:
        return {**self.graphdata.to_dict(), "pos": [p.to_dict() for p in self.graphpos]}


class GraphCache:
    """
    Single-writer store for the (graphdata, graphpos) pair.
    Readers get an immutable CacheState; the pair is replaced by one reference swap.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = CacheState(graphdata=GraphSnapshot.empty(), graphpos=())

    def snapshot(self) -> CacheState:
        with self._lock:
            return self._state

    def swap(self, graphdata: GraphSnapshot, graphpos: LayoutResult) -> CacheState:
        if [p.pub_key for p in graphpos] != graphdata.pub_keys():
            raise LayoutMismatchError(
                f"layout has {len(graphpos)} positions for {len(graphdata.nodes)} nodes or a different node order"
            )
        with self._lock:
            self._state = CacheState(
                graphdata=graphdata,
                graphpos=tuple(graphpos),
                generation=self._state.generation + 1,
                updated_at=time.time(),
            )
            return self._state
