import json
import shutil
from pathlib import Path

import pytest

from lnexplorer.core.config import ExplorerConfig
from lnexplorer.mocks.fixture_daemon import FixtureDaemon
from lnexplorer.mocks.layouts import FIXTURE_NOW_S, index_layout
from lnexplorer.service import ExplorerService

FIXTURE = Path(__file__).resolve().parents[1] / "mocks" / "fixtures" / "graph.json"


@pytest.fixture
def fixture_file(tmp_path) -> Path:
    dst = tmp_path / "graph.json"
    shutil.copy(FIXTURE, dst)
    return dst


@pytest.fixture
def set_fixture(fixture_file):
    def _set(**changes):
        data = json.loads(fixture_file.read_text())
        data.update(changes)
        fixture_file.write_text(json.dumps(data))
        return data
    return _set


@pytest.fixture
def cfg(fixture_file, tmp_path) -> ExplorerConfig:
    return ExplorerConfig(
        daemon="fixture",
        fixture_path=fixture_file,
        lnd_alias="explorer",
        prune_ttl_days=7,
        log_dir=tmp_path / "logs",
        update_interval_ms=60_000,
        graph_log_interval_ms=60_000,
    )


@pytest.fixture
def service(cfg) -> ExplorerService:
    svc = ExplorerService(cfg, FixtureDaemon(cfg.fixture_path), layout=index_layout)
    svc.refresher._clock = lambda: FIXTURE_NOW_S
    return svc
