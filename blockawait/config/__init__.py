"""
Configuration dataclasses and constants.
"""

from blockawait.config.config import (
    AwaitConfig,
    ConfigError,
    load_config,
    parse_assignments,
)
from blockawait.config.constants import (
    DEFAULT_DEADLINE,
    DEFAULT_OFFSET,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RPC_TIMEOUT,
    DEFAULT_RPC_URL,
    MAX_CONSECUTIVE_QUERY_ERRORS,
    NodeKind,
)

__all__ = [
    # config.py
    "AwaitConfig",
    "ConfigError",
    "load_config",
    "parse_assignments",
    # constants.py
    "DEFAULT_DEADLINE",
    "DEFAULT_OFFSET",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_RPC_TIMEOUT",
    "DEFAULT_RPC_URL",
    "MAX_CONSECUTIVE_QUERY_ERRORS",
    "NodeKind",
]
