"""
Sources of the current chain height.

A height source answers one question, "what is the node's height right now?",
and either returns a non-negative int or raises a `QueryError` subclass that
says why it could not. Each source bounds its own calls in time.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

import requests

from blockawait.config.constants import DEFAULT_RPC_TIMEOUT, NodeKind
from blockawait.rpc import InvalidResponseError, JsonRpcClient, RpcError

logger = logging.getLogger(__name__)


class QueryError(Exception):
    """A height query did not produce a height."""


class NodeUnreachableError(QueryError):
    """The node could not be reached (refused, DNS failure, timed out)."""


class NodeRpcError(QueryError):
    """The node answered, but with an error."""


class MalformedResponseError(QueryError):
    """The node answered with something that is not a usable height."""


class HeightSource(Protocol):
    name: str

    def query(self) -> int: ...


def parse_height(value: Any) -> int:
    """
    Coerce a height field into a non-negative int.

    Accepts ints, decimal strings and `0x` prefixed hex strings.
    """
    if isinstance(value, bool):
        raise MalformedResponseError(f"height is not an integer: {value!r}")
    if isinstance(value, int):
        height = value
    elif isinstance(value, str):
        try:
            height = int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError as e:
            raise MalformedResponseError(f"height is not an integer: {value!r}") from e
    else:
        raise MalformedResponseError(f"height is not an integer: {value!r}")

    if height < 0:
        raise MalformedResponseError(f"height is negative: {height}")
    return height


def _dig(obj: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(obj, dict) or key not in obj:
            raise MalformedResponseError(f"missing field {'.'.join(path)!r}")
        obj = obj[key]
    return obj


class RpcHeightSource:
    """
    Base for sources that issue one JSON-RPC call per query.

    Subclasses set `method` and implement `extract_height()`.
    """

    method: str = ""

    def __init__(
        self,
        url: str,
        name: str | None = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        rpc: JsonRpcClient | None = None,
    ):
        self.name = name or url
        self.rpc = rpc or JsonRpcClient(url, name=self.name, timeout=timeout)

    def extract_height(self, result: Any) -> int:
        raise NotImplementedError("Subclass must implement extract_height()")

    def query(self) -> int:
        try:
            result = self.rpc.call(self.method)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NodeUnreachableError(f"{self.name}: {e}") from e
        except requests.HTTPError as e:
            raise NodeRpcError(f"{self.name}: {e}") from e
        except RpcError as e:
            raise NodeRpcError(f"{self.name}: {e}") from e
        except InvalidResponseError as e:
            raise MalformedResponseError(f"{self.name}: {e}") from e
        except requests.RequestException as e:
            raise NodeUnreachableError(f"{self.name}: {e}") from e

        if result is None:
            raise MalformedResponseError(f"{self.name}: {self.method} returned no result")
        return self.extract_height(result)

    def close(self) -> None:
        self.rpc.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class CasperHeightSource(RpcHeightSource):
    """
    Height of the highest block a Casper node has added.

    `chain_get_block` with no params returns the latest block. Older nodes put
    it under `block`, newer ones under `block_with_signatures` with the block
    body wrapped in a version tag (`{"Version2": {...}}`).
    `info_get_status` reports it as `last_added_block_info.height`.
    """

    def __init__(self, url: str, method: str = "chain_get_block", **kwargs):
        if method not in ("chain_get_block", "info_get_status"):
            raise ValueError(f"unsupported casper height method: {method}")
        super().__init__(url, **kwargs)
        self.method = method

    def extract_height(self, result: Any) -> int:
        if self.method == "info_get_status":
            return parse_height(_dig(result, "last_added_block_info", "height"))

        if isinstance(result, dict) and "block_with_signatures" in result:
            block = _dig(result, "block_with_signatures", "block")
            if isinstance(block, dict) and "header" not in block and len(block) == 1:
                # Unwrap the version tag.
                block = next(iter(block.values()))
            return parse_height(_dig(block, "header", "height"))

        return parse_height(_dig(result, "block", "header", "height"))


class EthHeightSource(RpcHeightSource):
    """Ethereum-style `eth_blockNumber`, returned as a hex quantity."""

    method = "eth_blockNumber"

    def extract_height(self, result: Any) -> int:
        return parse_height(result)


class StrataHeightSource(RpcHeightSource):
    """Strata `strata_syncStatus`, tip height of the sequencer chain."""

    method = "strata_syncStatus"

    def extract_height(self, result: Any) -> int:
        return parse_height(_dig(result, "tip_height"))


class CallableHeightSource:
    """
    Adapt a plain callable into a height source.

    Exceptions other than `QueryError` raised by the callable are reported as
    a `QueryError` so that the awaiter treats them as failed queries.

    Usage:
        source = CallableHeightSource(service.get_block_number, name="sequencer")
    """

    def __init__(self, fn: Callable[[], Any], name: str | None = None):
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "callable")

    def query(self) -> int:
        try:
            value = self._fn()
        except QueryError:
            raise
        except Exception as e:
            raise QueryError(f"{self.name}: {type(e).__name__}: {e}") from e
        return parse_height(value)

    def __repr__(self) -> str:
        return f"CallableHeightSource({self.name!r})"


_SOURCES: dict[NodeKind, type[RpcHeightSource]] = {
    NodeKind.Casper: CasperHeightSource,
    NodeKind.Eth: EthHeightSource,
    NodeKind.Strata: StrataHeightSource,
}


def make_height_source(
    kind: NodeKind | str,
    url: str,
    timeout: float = DEFAULT_RPC_TIMEOUT,
    name: str | None = None,
) -> RpcHeightSource:
    """Build the JSON-RPC height source for a node family."""
    kind = NodeKind(kind)
    cls = _SOURCES[kind]
    logger.debug(f"using {cls.__name__} for {url}")
    return cls(url, name=name, timeout=timeout)
