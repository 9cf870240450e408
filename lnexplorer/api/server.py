"""
LN Explorer HTTP surface.

Endpoints:
- GET /networkgraph      -> cached recency-filtered graph (CORS)
- GET /networkgraphv2    -> same graph plus precalculated positions (CORS)
- GET /getinvoice        -> tip invoice via the lightning daemon (no-cache)
- GET /invoicestatus     -> settlement flag of a tip invoice (no-cache)

Usage:
    uvicorn lnexplorer.api.server:create_app --factory
"""
from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

from lnexplorer.core.config import ExplorerConfig
from lnexplorer.core.events import describe_error, print_event
from lnexplorer.lightning.base import DaemonError
from lnexplorer.lightning.factory import create_daemon
from lnexplorer.service import ExplorerService

TIP_MEMO = "LN Explorer Tips"
# uint32 msat limit expressed in sat
MAX_TIP_SAT = 4_294_967

MSG_MALFORMED_TIP = "Malformed tip value"
MSG_TIP_TOO_LARGE = (
    "Whoah, thanks for generosity but tips under uint32 limit will do! (4,294,967,295 msat to be precise)"
)
MSG_INVOICE_FAILED = "Error generating invoice"
MSG_MALFORMED_RHASH = "Malformed rhash"
MSG_STATUS_FAILED = "Error checking invoice status"

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}
NO_CACHE_HEADERS: Dict[str, str] = {"Cache-Control": "no-cache"}

_INT_RE = re.compile(r"[+-]?[0-9]+")
_RHASH_RE = re.compile(r"[0-9A-Fa-f]{64}")


def parse_tip_value(raw: Optional[str]) -> int:
    """Validated tip amount in sat; ValueError carries the client-facing message."""
    if raw is None or not _INT_RE.fullmatch(raw.strip()):
        raise ValueError(MSG_MALFORMED_TIP)
    value = int(raw.strip())
    if value < 1:
        raise ValueError(MSG_MALFORMED_TIP)
    if value > MAX_TIP_SAT:
        raise ValueError(MSG_TIP_TOO_LARGE)
    return value


def is_rhash(raw: Optional[str]) -> bool:
    return raw is not None and _RHASH_RE.fullmatch(raw) is not None


def create_app(service: Optional[ExplorerService] = None, manage_lifecycle: bool = True) -> FastAPI:
    if service is None:
        cfg = ExplorerConfig.from_env()
        service = ExplorerService(cfg, create_daemon(cfg))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_lifecycle:
            service.start()
        yield
        if manage_lifecycle:
            service.stop()

    app = FastAPI(title="LN Explorer Backend", version="0.1.0", lifespan=lifespan)
    app.state.service = service

    # FORCE SSL behind a TLS-terminating proxy
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            host = request.headers.get("host", request.url.netloc)
            target = f"https://{host}{request.url.path}"
            if request.url.query:
                target += f"?{request.url.query}"
            return RedirectResponse(target, status_code=302)
        return await call_next(request)

    @app.get("/networkgraph")
    def network_graph() -> Response:
        state = service.cache.snapshot()
        return JSONResponse(state.graph_json(), headers=CORS_HEADERS)

    @app.get("/networkgraphv2")
    def network_graph_v2() -> Response:
        state = service.cache.snapshot()
        return JSONResponse(state.graph_with_positions_json(), headers=CORS_HEADERS)

    # Sync handlers: FastAPI runs them in its threadpool, daemon calls block
    @app.get("/getinvoice")
    def get_invoice(value: Optional[str] = None) -> Response:
        try:
            sat = parse_tip_value(value)
        except ValueError as e:
            return PlainTextResponse(str(e), status_code=400, headers=NO_CACHE_HEADERS)

        try:
            invoice = service.daemon.add_invoice(TIP_MEMO, sat)
        except DaemonError as e:
            print_event("invoice_failed", {"op": "add_invoice", "value": sat, "error": describe_error(e)})
            return PlainTextResponse(MSG_INVOICE_FAILED, status_code=500, headers=NO_CACHE_HEADERS)

        return JSONResponse(invoice, headers=NO_CACHE_HEADERS)

    @app.get("/invoicestatus")
    def invoice_status(rhash: Optional[str] = None) -> Response:
        if not is_rhash(rhash):
            return PlainTextResponse(MSG_MALFORMED_RHASH, status_code=400, headers=NO_CACHE_HEADERS)

        try:
            invoice = service.daemon.lookup_invoice(rhash)
        except DaemonError as e:
            print_event("invoice_failed", {"op": "lookup_invoice", "rhash": rhash, "error": describe_error(e)})
            return PlainTextResponse(MSG_STATUS_FAILED, status_code=500, headers=NO_CACHE_HEADERS)

        return JSONResponse(bool(invoice.get("settled", False)), headers=NO_CACHE_HEADERS)

    return app
