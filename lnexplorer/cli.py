from __future__ import annotations

import argparse
import json
from pathlib import Path

import uvicorn

from lnexplorer.api.server import create_app
from lnexplorer.core.config import ExplorerConfig
from lnexplorer.lightning.factory import create_daemon
from lnexplorer.service import ExplorerService


def main() -> None:
    p = argparse.ArgumentParser(prog="lnexplorer", description="LN Explorer graph backend")
    sub = p.add_subparsers(dest="cmd", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server with background refresh and snapshots")
    serve.add_argument("--host", default=None, help="Bind address (default: HTTP_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: HTTP_PORT)")

    fetch = sub.add_parser("fetch", help="Run one fetch/filter/layout cycle and print a summary")
    fetch.add_argument("--output", default=None, help="Also write the filtered graph with positions to this file")

    args = p.parse_args()

    cfg = ExplorerConfig.from_env()
    service = ExplorerService(cfg, create_daemon(cfg))

    if args.cmd == "serve":
        app = create_app(service)
        uvicorn.run(app, host=args.host or cfg.http_host, port=args.port or cfg.http_port)
        return

    if args.cmd == "fetch":
        ok = service.refresher.refresh_once()
        state = service.cache.snapshot()
        if ok and args.output:
            Path(args.output).write_text(json.dumps(state.graph_with_positions_json()), encoding="utf-8")
        print(
            json.dumps(
                {
                    "ok": ok,
                    "source": service.refresher.source,
                    "nodes": len(state.graphdata.nodes),
                    "edges": len(state.graphdata.edges),
                    "output": args.output if ok else None,
                },
                indent=2,
            )
        )
        if not ok:
            raise SystemExit(1)
        return


if __name__ == "__main__":
    main()
