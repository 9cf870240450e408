from __future__ import annotations

import contextlib
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from lnexplorer.core.events import describe_error, print_event
from lnexplorer.graph.cache import GraphCache

SNAPSHOT_PREFIX = "networkgraph_"
SNAPSHOT_TIME_FORMAT = "%Y-%m-%d_%H-%M"


def snapshot_path(log_dir: Path, when: datetime) -> Path:
    return Path(log_dir) / f"{SNAPSHOT_PREFIX}{when.strftime(SNAPSHOT_TIME_FORMAT)}.json"


class SnapshotWriter:
    """
    Best-effort periodic backup of the cached graph. Never raises.
    """

    def __init__(self, cache: GraphCache, log_dir: Path, now: Callable[[], datetime] = datetime.now) -> None:
        self.cache = cache
        self.log_dir = Path(log_dir)
        self._now = now

    def write_once(self) -> Optional[Path]:
        state = self.cache.snapshot()
        path = snapshot_path(self.log_dir, self._now())
        tmp = path.with_name(path.name + ".tmp")
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(state.graph_json(), f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            # tmp may not exist, or its directory may be unusable
            with contextlib.suppress(OSError):
                tmp.unlink()
            print_event("graph_save_failed", {"path": str(path), "error": describe_error(e)})
            return None

        print_event("graph_saved", {"path": str(path), "generation": state.generation})
        return path
