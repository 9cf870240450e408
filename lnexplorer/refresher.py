from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Callable, Optional

from lnexplorer.core.events import describe_error, print_event
from lnexplorer.graph.cache import GraphCache
from lnexplorer.graph.layout import LayoutFn
from lnexplorer.graph.model import GraphSnapshot
from lnexplorer.graph.recency import filter_recent
from lnexplorer.lightning.base import DaemonError, LightningDaemon


class GraphRefresher:
    """
    Fetch -> filter -> layout -> swap.

    The only writer of the cache. A failed fetch or layout leaves the previous
    consistent pair in place; the next scheduled cycle tries again.
    """

    def __init__(
        self,
        cache: GraphCache,
        layout: LayoutFn,
        daemon: Optional[LightningDaemon] = None,
        dummy_data_path: Optional[Path] = None,
        prune_ttl_ms: float = 0.0,
        protected_alias: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if daemon is None and dummy_data_path is None:
            raise ValueError("GraphRefresher needs a daemon or a dummy_data_path")
        self.cache = cache
        self._layout = layout
        self._daemon = daemon
        self._dummy_data_path = Path(dummy_data_path) if dummy_data_path is not None else None
        self._prune_ttl_ms = prune_ttl_ms
        self._protected_alias = protected_alias
        self._clock = clock

    @property
    def source(self) -> str:
        if self._dummy_data_path is not None:
            return f"file:{self._dummy_data_path}"
        return f"daemon:{self._daemon.name}"

    def fetch_raw(self) -> GraphSnapshot:
        if self._dummy_data_path is not None:
            raw = json.loads(self._dummy_data_path.read_text(encoding="utf-8"))
            return GraphSnapshot.from_dict(raw)
        return self._daemon.describe_graph()

    def refresh_once(self) -> bool:
        print_event("graph_fetch_start", {"source": self.source})
        try:
            raw = self.fetch_raw()
        except (OSError, ValueError, DaemonError) as e:
            print_event("graph_fetch_failed", {"source": self.source, "error": describe_error(e)})
            return False

        print_event("graph_fetch_ok", {"nodes": len(raw.nodes), "edges": len(raw.edges)})

        recent = filter_recent(raw, self._prune_ttl_ms, self._protected_alias, now_ms=self._clock() * 1000)

        started = time.monotonic()
        try:
            positions = self._layout(recent)
            state = self.cache.swap(recent, positions)
        except Exception as e:
            print_event("graph_layout_failed", {"error": describe_error(e)})
            return False

        print_event(
            "graph_updated",
            {
                "generation": state.generation,
                "nodes": len(recent.nodes),
                "edges": len(recent.edges),
                "pruned_nodes": len(raw.nodes) - len(recent.nodes),
                "layout_s": round(time.monotonic() - started, 3),
            },
        )
        return True
