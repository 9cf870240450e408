from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Dict

from lnexplorer.graph.model import GraphFormatError, GraphSnapshot
from lnexplorer.lightning.base import DaemonResponseError, DaemonUnavailableError, LightningDaemon


class FixtureDaemon(LightningDaemon):
    """
    Fixture-backed daemon for local development and tests.
    Re-reads the fixture on every call, so edits take effect on the next refresh.

    Fixture shape:
      {"graph": {"nodes": [...], "edges": [...]},
       "invoices": {"<hex r_hash>": {"settled": true, ...}},
       "fail_tools": ["describe_graph", ...]}
    """

    name = "fixture"

    def __init__(self, fixture_path: Path) -> None:
        self.fixture_path = Path(fixture_path)

    def _load(self, tool: str) -> Dict[str, Any]:
        try:
            data = json.loads(self.fixture_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise DaemonUnavailableError(f"Fixture not readable: {self.fixture_path}") from e
        if tool in data.get("fail_tools", []):
            raise DaemonUnavailableError(f"ToolFailure: {tool}")
        return data

    def describe_graph(self) -> GraphSnapshot:
        data = self._load("describe_graph")
        try:
            return GraphSnapshot.from_dict(data.get("graph"))
        except GraphFormatError as e:
            raise DaemonResponseError(str(e)) from e

    def add_invoice(self, memo: str, value: int) -> Dict[str, Any]:
        self._load("add_invoice")
        r_hash = uuid.uuid4().hex * 2
        return {"r_hash": r_hash, "payment_request": f"lnbcrt{int(value)}fixture{r_hash[:16]}", "memo": memo, "value": value}

    def lookup_invoice(self, r_hash_str: str) -> Dict[str, Any]:
        data = self._load("lookup_invoice")
        inv = data.get("invoices", {}).get(r_hash_str.lower())
        if inv is None:
            raise DaemonResponseError(f"No invoice with r_hash {r_hash_str}")
        return {**inv, "settled": bool(inv.get("settled", False))}
