from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from lnexplorer.graph.model import GraphFormatError, GraphSnapshot
from lnexplorer.lightning.base import (
    DaemonResponseError,
    DaemonTimeoutError,
    DaemonUnavailableError,
    LightningDaemon,
)


def _b64_to_hex(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return base64.b64decode(value, validate=True).hex()
    except (binascii.Error, ValueError):
        return value


class LndDaemon(LightningDaemon):
    """
    lnd adapter over the REST gateway. All lnd-specific behavior stays here.

    Credentials are read on first use so the server can come up before lnd does.
    """

    name = "lnd"

    def __init__(self, host: str, cert_path: Path, macaroon_path: Path, timeout_s: float = 30.0) -> None:
        self._base_url = host if host.startswith("http") else f"https://{host}"
        self._base_url = self._base_url.rstrip("/")
        self._cert_path = Path(cert_path)
        self._macaroon_path = Path(macaroon_path)
        self._timeout_s = timeout_s
        self._session: Optional[requests.Session] = None

    @staticmethod
    def from_dir(host: str, lnd_dir: Path, timeout_s: float = 30.0) -> "LndDaemon":
        lnd_dir = Path(lnd_dir)
        return LndDaemon(host, lnd_dir / "tls.cert", lnd_dir / "admin.macaroon", timeout_s)

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        if not self._cert_path.exists():
            raise DaemonUnavailableError(f"lnd TLS certificate not found: {self._cert_path}")
        try:
            macaroon = self._macaroon_path.read_bytes().hex()
        except OSError as e:
            raise DaemonUnavailableError(f"Cannot read lnd macaroon {self._macaroon_path}: {e}") from e

        session = requests.Session()
        session.headers["Grpc-Metadata-macaroon"] = macaroon
        session.verify = str(self._cert_path)
        self._session = session
        return session

    def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        session = self._get_session()
        url = f"{self._base_url}{path}"
        try:
            resp = session.request(method, url, json=payload, timeout=self._timeout_s)
        except requests.Timeout as e:
            raise DaemonTimeoutError(f"lnd {method} {path} timed out after {self._timeout_s}s") from e
        except requests.RequestException as e:
            raise DaemonUnavailableError(f"lnd {method} {path} failed: {e}") from e

        if resp.status_code != 200:
            raise DaemonResponseError(f"lnd {method} {path} returned HTTP {resp.status_code}: {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise DaemonResponseError(f"lnd {method} {path} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise DaemonResponseError(f"lnd {method} {path} returned {type(data).__name__}, expected object")
        return data

    def describe_graph(self) -> GraphSnapshot:
        data = self._call("GET", "/v1/graph")
        try:
            return GraphSnapshot.from_dict(data)
        except GraphFormatError as e:
            raise DaemonResponseError(f"lnd returned a malformed graph: {e}") from e

    def add_invoice(self, memo: str, value: int) -> Dict[str, Any]:
        invoice = self._call("POST", "/v1/invoices", {"memo": memo, "value": str(int(value))})
        # REST encodes bytes as base64; hex is what /invoicestatus expects back
        if "r_hash" in invoice:
            invoice["r_hash"] = _b64_to_hex(invoice["r_hash"])
        return invoice

    def lookup_invoice(self, r_hash_str: str) -> Dict[str, Any]:
        invoice = self._call("GET", f"/v1/invoice/{r_hash_str}")
        if not isinstance(invoice.get("settled"), bool):
            invoice["settled"] = invoice.get("state") == "SETTLED"
        return invoice
