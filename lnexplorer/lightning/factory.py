from lnexplorer.core.config import ExplorerConfig
from lnexplorer.lightning.adapters.cln_backend import ClnDaemon
from lnexplorer.lightning.adapters.lnd_backend import LndDaemon
from lnexplorer.lightning.base import LightningDaemon
from lnexplorer.mocks.fixture_daemon import FixtureDaemon


def create_daemon(cfg: ExplorerConfig) -> LightningDaemon:
    """
    Factory returns the daemon-specific client that implements LightningDaemon.
    Chosen once at startup; call sites stay daemon-agnostic.
    """
    daemon = cfg.daemon.strip().lower()

    if daemon in ("", "lnd"):
        return LndDaemon.from_dir(cfg.lnd_host, cfg.lnd_dir, timeout_s=cfg.rpc_timeout_s)

    if daemon == "clightning":
        return ClnDaemon(
            cfg.clightning_dir,
            network=cfg.clightning_network,
            lightning_cli=cfg.lightning_cli,
            timeout_s=cfg.rpc_timeout_s,
        )

    if daemon == "fixture":
        if cfg.fixture_path is None:
            raise ValueError("LN_DAEMON=fixture requires LN_FIXTURE_PATH")
        return FixtureDaemon(cfg.fixture_path)

    raise ValueError(f"Unsupported LN_DAEMON: {cfg.daemon}")
