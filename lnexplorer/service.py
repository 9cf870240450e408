from __future__ import annotations

from typing import Optional

from lnexplorer.core.config import ExplorerConfig
from lnexplorer.core.events import print_event
from lnexplorer.core.scheduler import PeriodicWorker
from lnexplorer.graph.cache import GraphCache
from lnexplorer.graph.layout import LayoutFn, layout_from_config
from lnexplorer.lightning.base import LightningDaemon
from lnexplorer.refresher import GraphRefresher
from lnexplorer.snapshots import SnapshotWriter


class ExplorerService:
    """
    Owns the cache and the two background schedules that feed and back it up.
    """

    def __init__(self, cfg: ExplorerConfig, daemon: LightningDaemon, layout: Optional[LayoutFn] = None) -> None:
        self.cfg = cfg
        self.daemon = daemon
        self.cache = GraphCache()
        self.refresher = GraphRefresher(
            cache=self.cache,
            layout=layout or layout_from_config(cfg.layout_iterations, cfg.layout_seed, cfg.layout_scale),
            daemon=daemon,
            dummy_data_path=cfg.dummy_data_path,
            prune_ttl_ms=cfg.prune_ttl_ms,
            protected_alias=cfg.lnd_alias,
        )
        self.snapshots = SnapshotWriter(self.cache, cfg.log_dir)
        self._workers = [
            PeriodicWorker("graph-refresh", cfg.update_interval_ms, self.refresher.refresh_once, run_immediately=True),
            PeriodicWorker("graph-snapshot", cfg.graph_log_interval_ms, self.snapshots.write_once, run_immediately=False),
        ]

    def start(self) -> None:
        print_event(
            "service_start",
            {
                "daemon": self.daemon.name,
                "source": self.refresher.source,
                "update_interval_ms": self.cfg.update_interval_ms,
                "graph_log_interval_ms": self.cfg.graph_log_interval_ms,
                "prune_ttl_days": self.cfg.prune_ttl_days,
                "log_dir": str(self.cfg.log_dir),
            },
        )
        for w in self._workers:
            w.start()

    def stop(self, timeout_s: Optional[float] = 5.0) -> None:
        for w in self._workers:
            w.stop(timeout_s)
        print_event("service_stop", {"generation": self.cache.snapshot().generation})
