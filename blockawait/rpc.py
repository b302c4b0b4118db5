"""
Minimal JSON-RPC 2.0 client used by the node height sources.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import requests

from blockawait.config.constants import DEFAULT_RPC_TIMEOUT


class RpcError(Exception):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, error: dict):
        self.code = error.get("code")
        self.message = error.get("message")
        self.data = error.get("data")
        super().__init__(f"RPC Error {self.code}: {self.message}")


class InvalidResponseError(Exception):
    """Raised when the HTTP body is not a JSON-RPC response."""


class JsonRpcClient:
    """
    JSON-RPC 2.0 client over HTTP POST.

    Supports attribute-style method calls:
        rpc.chain_get_block()
        rpc.eth_blockNumber()

    Usage:
        rpc = JsonRpcClient("http://localhost:11101/rpc")
        block = rpc.call("chain_get_block")
    """

    def __init__(
        self,
        url: str,
        name: str | None = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        session: requests.Session | None = None,
    ):
        if not timeout > 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.url = url
        self.name = name or url
        self.timeout = timeout
        self.id_counter = 0
        self.session = session or requests.Session()
        self.logger = logging.getLogger(f"rpc.{self.name}")
        self.pre_call_hook: Callable[[str], None] = lambda _: None

    def set_pre_call_hook(self, hook: Callable[[str], None]):
        self.pre_call_hook = hook

    def __getattr__(self, method: str):
        if method.startswith("_"):
            raise AttributeError(method)

        def rpc_call(*params):
            return self._call(method, params)

        return rpc_call

    def _call(self, method: str, params: tuple) -> Any:
        """
        Make a JSON-RPC call.

        Raises:
            RpcError: If the node returns an error object
            InvalidResponseError: If the body is not valid JSON-RPC
            requests.RequestException: If the HTTP request fails
        """
        self.pre_call_hook(method)
        self.id_counter += 1

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
            "id": self.id_counter,
        }

        self.logger.debug(f"RPC call: {method}({params})")

        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            self.logger.debug(f"RPC request failed: {e}")
            raise

        try:
            result = resp.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise InvalidResponseError(f"invalid JSON from {self.name}: {e}") from e

        if not isinstance(result, dict):
            raise InvalidResponseError(f"expected a JSON object from {self.name}, got {result!r}")

        if "error" in result:
            error = result.get("error") or {}
            self.logger.debug(f"RPC error: {error}")
            raise RpcError(error if isinstance(error, dict) else {"message": str(error)})

        return result.get("result")

    def call(self, method: str, *params) -> Any:
        """
        Explicit call method (alternative to attribute style).

        Usage:
            rpc.call("info_get_status")
        """
        return self._call(method, params)

    def close(self) -> None:
        """Release the pooled HTTP connections."""
        self.session.close()
