"""
Block-height await primitive.
Blocks until a node's chain height advances by a given offset, or a deadline passes.
"""

from .awaiter import BlockAwaiter, await_blocks
from .config import AwaitConfig, ConfigError, NodeKind
from .height_source import (
    CallableHeightSource,
    CasperHeightSource,
    EthHeightSource,
    HeightSource,
    MalformedResponseError,
    NodeRpcError,
    NodeUnreachableError,
    QueryError,
    StrataHeightSource,
    make_height_source,
)
from .outcome import BlockAwaitError, Failed, FailureCause, PollOutcome, Succeeded, TimedOut
from .request import AwaitRequest
from .rpc import JsonRpcClient, RpcError
from .wait import wait_for_additional_blocks

__all__ = [
    "AwaitConfig",
    "AwaitRequest",
    "BlockAwaitError",
    "BlockAwaiter",
    "CallableHeightSource",
    "CasperHeightSource",
    "ConfigError",
    "EthHeightSource",
    "Failed",
    "FailureCause",
    "HeightSource",
    "JsonRpcClient",
    "MalformedResponseError",
    "NodeKind",
    "NodeRpcError",
    "NodeUnreachableError",
    "PollOutcome",
    "QueryError",
    "RpcError",
    "StrataHeightSource",
    "Succeeded",
    "TimedOut",
    "await_blocks",
    "make_height_source",
    "wait_for_additional_blocks",
]
