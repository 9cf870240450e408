"""
Core Lightning (CLN) adapter over `lightning-cli`.

The RPC socket lives at <lightning-dir>/<network>/lightning-rpc and is passed
explicitly with --rpc-file, so no assumption is made about the default network.
Graph data is reshaped to the lnd layout the rest of the service expects.
"""

from __future__ import annotations

import json
import subprocess
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from lnexplorer.graph.model import Edge, GraphSnapshot, Node
from lnexplorer.lightning.base import (
    DaemonResponseError,
    DaemonTimeoutError,
    DaemonUnavailableError,
    LightningDaemon,
)

# listnodes fields that become core Node fields
_NODE_RENAMED = {"nodeid", "alias", "last_timestamp"}


def _channel_capacity_sat(ch: Dict[str, Any]) -> Optional[int]:
    if isinstance(ch.get("satoshis"), int):
        return ch["satoshis"]
    msat = ch.get("amount_msat")
    if isinstance(msat, int):
        return msat // 1000
    # pre-23.x CLN renders msat amounts as "1000msat"
    if isinstance(msat, str) and msat.endswith("msat"):
        try:
            return int(msat[:-4]) // 1000
        except ValueError:
            return None
    return None


def nodes_from_listnodes(payload: Dict[str, Any]) -> List[Node]:
    out: List[Node] = []
    for raw in payload.get("nodes") or []:
        if not isinstance(raw, dict) or "nodeid" not in raw:
            raise DaemonResponseError("listnodes returned a node without 'nodeid'")
        out.append(
            Node(
                pub_key=str(raw["nodeid"]),
                alias=str(raw.get("alias") or ""),
                # nodes without a node_announcement have no timestamp
                last_update=raw.get("last_timestamp"),
                extra={k: v for k, v in raw.items() if k not in _NODE_RENAMED},
            )
        )
    return out


def edges_from_listchannels(payload: Dict[str, Any]) -> List[Edge]:
    """
    listchannels reports one entry per direction; collapse them into one
    edge per short_channel_id with node1_pub < node2_pub, like lnd does.
    """
    by_scid: Dict[str, Dict[str, Any]] = {}
    for ch in payload.get("channels") or []:
        if not isinstance(ch, dict) or "source" not in ch or "destination" not in ch:
            raise DaemonResponseError("listchannels returned a channel without source/destination")
        scid = str(ch.get("short_channel_id", f"{ch['source']}:{ch['destination']}"))
        node1, node2 = sorted((str(ch["source"]), str(ch["destination"])))
        policy = {
            "base_fee_msat": ch.get("base_fee_millisatoshi"),
            "fee_rate_milli_msat": ch.get("fee_per_millionth"),
            "time_lock_delta": ch.get("delay"),
            "disabled": not ch.get("active", True),
            "last_update": ch.get("last_update"),
        }
        edge = by_scid.setdefault(
            scid,
            {
                "channel_id": scid,
                "node1_pub": node1,
                "node2_pub": node2,
                "capacity": _channel_capacity_sat(ch),
                "last_update": ch.get("last_update"),
                "node1_policy": None,
                "node2_policy": None,
            },
        )
        side = "node1_policy" if str(ch["source"]) == node1 else "node2_policy"
        edge[side] = policy
        lu = ch.get("last_update")
        if isinstance(lu, int) and (not isinstance(edge["last_update"], int) or lu > edge["last_update"]):
            edge["last_update"] = lu

    return [Edge.from_dict(e) for e in by_scid.values()]


class ClnDaemon(LightningDaemon):
    name = "clightning"

    def __init__(
        self,
        lightning_dir: Path,
        network: str = "bitcoin",
        lightning_cli: str = "lightning-cli",
        timeout_s: float = 30.0,
    ) -> None:
        self.lightning_dir = Path(lightning_dir).expanduser()
        self.network = network
        self.lightning_cli = lightning_cli
        self.timeout_s = timeout_s
        self.rpc_file = self.lightning_dir / self.network / "lightning-rpc"

    def _run(self, args: List[str]) -> Dict[str, Any]:
        """
        Execute a lightning-cli command and parse its JSON answer.
        Every failure surfaces as a normalized DaemonError.
        """
        if not self.rpc_file.exists():
            raise DaemonUnavailableError(f"Lightning RPC socket not found: {self.rpc_file} (is lightningd running?)")

        cmd = [self.lightning_cli, f"--rpc-file={self.rpc_file}", *args]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_s, check=False)
        except FileNotFoundError as e:
            raise DaemonUnavailableError(f"Command not found: {self.lightning_cli}") from e
        except subprocess.TimeoutExpired as e:
            raise DaemonTimeoutError(f"Timeout after {self.timeout_s}s: {' '.join(args)}") from e

        if result.returncode != 0:
            err = (result.stderr or result.stdout or "").strip()
            raise DaemonResponseError(f"lightning-cli {args[0]} failed ({result.returncode}): {err[:500]}")

        try:
            data = json.loads(result.stdout)
        except ValueError as e:
            raise DaemonResponseError(f"lightning-cli {args[0]} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise DaemonResponseError(f"lightning-cli {args[0]} returned {type(data).__name__}, expected object")
        return data

    def describe_graph(self) -> GraphSnapshot:
        nodes = nodes_from_listnodes(self._run(["listnodes"]))
        edges = edges_from_listchannels(self._run(["listchannels"]))
        return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))

    def add_invoice(self, memo: str, value: int) -> Dict[str, Any]:
        # Labels must be unique forever
        label = f"lnexplorer-{uuid.uuid4().hex}"
        inv = self._run(["invoice", str(int(value) * 1000), label, memo])
        return {
            **inv,
            "r_hash": inv.get("payment_hash"),
            "payment_request": inv.get("bolt11"),
            "label": label,
        }

    def lookup_invoice(self, r_hash_str: str) -> Dict[str, Any]:
        payload = self._run(["-k", "listinvoices", f"payment_hash={r_hash_str}"])
        invoices = payload.get("invoices") or []
        if not invoices:
            raise DaemonResponseError(f"No invoice with payment_hash {r_hash_str}")
        inv = invoices[0]
        return {**inv, "r_hash": inv.get("payment_hash"), "settled": inv.get("status") == "paid"}
