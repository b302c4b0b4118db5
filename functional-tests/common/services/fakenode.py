"""
Fake chain node service, the target every await test polls.
"""

from typing import TypedDict

from blockawait import JsonRpcClient, NodeKind, make_height_source
from blockawait.height_source import RpcHeightSource
from common.services.base import RpcService


class FakeNodeProps(TypedDict):
    """Properties for the fake node service."""

    rpc_port: int
    rpc_url: str
    datadir: str
    block_time: float


class FakeNodeService(RpcService):
    """
    RpcService for the fake node with health check via `chain_get_block`.
    """

    props: FakeNodeProps

    def __init__(
        self,
        props: FakeNodeProps,
        cmd: list[str],
        stdout: str | None = None,
        name: str | None = None,
    ):
        super().__init__(dict(props), cmd, stdout, name)

    def _rpc_health_check(self, rpc):
        rpc.chain_get_block()

    def create_rpc(self) -> JsonRpcClient:
        if not self.check_status():
            raise RuntimeError("Service is not running")

        rpc = JsonRpcClient(self.props["rpc_url"], name=self._name, timeout=2)

        def _status_check(method: str):
            if not self.check_status():
                self._logger.warning(f"service '{self._name}' stopped before call to {method}")
                raise RuntimeError(f"process '{self._name}' is not running")

        rpc.set_pre_call_hook(_status_check)
        return rpc

    def height_source(self, kind: NodeKind | str = NodeKind.Casper) -> RpcHeightSource:
        """
        Height source for this node.

        Unlike `create_rpc()` this works while the node is down, queries then
        fail with `NodeUnreachableError` the way they would against a real node.
        """
        return make_height_source(kind, self.props["rpc_url"], timeout=2, name=self._name)
