from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from lnexplorer.graph.model import GraphSnapshot


# -----------------------------
# Normalized error taxonomy
# -----------------------------

class DaemonError(Exception):
    """Base class for all normalized daemon errors."""


class DaemonTimeoutError(DaemonError):
    """The daemon did not answer within the configured timeout."""


class DaemonUnavailableError(DaemonError):
    """Connection refused, socket missing, credentials unreadable."""


class DaemonResponseError(DaemonError):
    """The daemon answered, but with an error or a payload we cannot use."""


# -----------------------------
# Daemon interface
# -----------------------------

class LightningDaemon(ABC):
    name: str = "daemon"

    @abstractmethod
    def describe_graph(self) -> GraphSnapshot:
        """
        The daemon's full view of the channel graph, lnd-shaped
        ({nodes: [{pub_key, alias, last_update, ...}], edges: [{node1_pub, node2_pub, ...}]}).
        """
        raise NotImplementedError

    @abstractmethod
    def add_invoice(self, memo: str, value: int) -> Dict[str, Any]:
        """Create an invoice for `value` satoshis. Returns the daemon's invoice object."""
        raise NotImplementedError

    @abstractmethod
    def lookup_invoice(self, r_hash_str: str) -> Dict[str, Any]:
        """
        Look up an invoice by hex payment hash.
        MUST return a dict carrying a boolean 'settled'.
        """
        raise NotImplementedError
