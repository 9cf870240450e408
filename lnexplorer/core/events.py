from __future__ import annotations

import json
import sys
import time
from typing import Any, Dict, Optional


def describe_error(exc: BaseException) -> str:
    return f"{exc.__class__.__name__}: {exc}"


def print_event(kind: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Deterministic structured logging: one JSON object per line on stdout.
    """
    out = {"ts": int(time.time()), "kind": kind, **(payload or {})}
    sys.stdout.write(json.dumps(out, ensure_ascii=False, default=str) + "\n")
    sys.stdout.flush()
