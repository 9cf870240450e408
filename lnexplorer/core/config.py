from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_opt(name: str) -> Optional[str]:
    v = os.getenv(name)
    return None if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else int(v)


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else float(v)


MS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class ExplorerConfig:
    # Daemon selection: "lnd" (default), "clightning" or "fixture"
    daemon: str = "lnd"

    # lnd REST gateway
    lnd_dir: Path = Path("~/.lnd").expanduser()
    lnd_host: str = "localhost:8080"

    # Core Lightning
    clightning_dir: Path = Path("~/.lightning").expanduser()
    clightning_network: str = "bitcoin"
    lightning_cli: str = "lightning-cli"

    # Fixture daemon (local development only)
    fixture_path: Optional[Path] = None

    # Graph pruning
    lnd_alias: str = ""
    prune_ttl_days: float = 14.0

    # Cadence
    update_interval_ms: int = 300_000
    graph_log_interval_ms: int = 3_600_000

    # Static graph source, bypasses describe_graph when set
    dummy_data_path: Optional[Path] = None

    # Snapshot output
    log_dir: Path = Path("logs")

    rpc_timeout_s: float = 30.0

    # Layout shaping
    layout_iterations: int = 50
    layout_seed: int = 42
    layout_scale: float = 1000.0

    http_host: str = "0.0.0.0"
    http_port: int = 8000

    @property
    def prune_ttl_ms(self) -> float:
        return self.prune_ttl_days * MS_PER_DAY

    def validate(self) -> "ExplorerConfig":
        if self.update_interval_ms <= 0:
            raise ValueError("update_interval_ms must be > 0")
        if self.graph_log_interval_ms <= 0:
            raise ValueError("graph_log_interval_ms must be > 0")
        if self.rpc_timeout_s <= 0:
            raise ValueError("rpc_timeout_s must be > 0")
        if self.layout_iterations <= 0:
            raise ValueError("layout_iterations must be > 0")
        return self

    @staticmethod
    def from_env() -> "ExplorerConfig":
        dummy = _env_opt("DUMMY_DATA_PATH")
        fixture = _env_opt("LN_FIXTURE_PATH")
        return ExplorerConfig(
            daemon=_env("LN_DAEMON", "lnd").lower(),
            lnd_dir=Path(_env("LND_DIR", "~/.lnd")).expanduser(),
            lnd_host=_env("LND_HOST", "localhost:8080"),
            clightning_dir=Path(_env("CLIGHTNING_DIR", "~/.lightning")).expanduser(),
            clightning_network=_env("CLIGHTNING_NETWORK", "bitcoin"),
            lightning_cli=_env("LIGHTNING_CLI", "lightning-cli"),
            fixture_path=Path(fixture).expanduser() if fixture else None,
            lnd_alias=_env("LND_ALIAS", ""),
            prune_ttl_days=_env_float("PRUNE_TTL_DAYS", 14.0),
            update_interval_ms=_env_int("UPDATE_INTERVAL_MS", 300_000),
            graph_log_interval_ms=_env_int("GRAPH_LOG_INTERVAL_MS", 3_600_000),
            dummy_data_path=Path(dummy).expanduser() if dummy else None,
            log_dir=Path(_env("LOG_DIR", "logs")).expanduser(),
            rpc_timeout_s=_env_float("RPC_TIMEOUT_S", 30.0),
            layout_iterations=_env_int("LAYOUT_ITERATIONS", 50),
            layout_seed=_env_int("LAYOUT_SEED", 42),
            layout_scale=_env_float("LAYOUT_SCALE", 1000.0),
            http_host=_env("HTTP_HOST", "0.0.0.0"),
            http_port=_env_int("HTTP_PORT", 8000),
        ).validate()
