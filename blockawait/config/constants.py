"""
Defaults and identifiers shared across the package.
"""

from enum import Enum

DEFAULT_OFFSET = 1
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_DEADLINE: float | None = None

# In-loop query failures tolerated in a row before the wait is abandoned.
MAX_CONSECUTIVE_QUERY_ERRORS = 3

# Per-call HTTP timeout for JSON-RPC height queries, in seconds.
DEFAULT_RPC_TIMEOUT = 10

DEFAULT_RPC_URL = "http://localhost:11101/rpc"

ENV_RPC_URL = "BLOCKAWAIT_RPC_URL"
ENV_NODE_KIND = "BLOCKAWAIT_NODE_KIND"


class NodeKind(str, Enum):
    """
    Node families we know how to ask for a chain height.

    Using str Enum allows direct string comparison while providing
    IDE autocomplete and type safety.

    Usage:
        source = make_height_source(NodeKind.Casper, "http://localhost:11101/rpc")
    """

    Casper = "casper"
    Eth = "eth"
    Strata = "strata"

    def __str__(self) -> str:
        """Allow direct use in f-strings and format operations."""
        return self.value
