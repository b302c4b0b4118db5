"""
Fake node factory.
Starts fake chain nodes that produce blocks on a timer.
"""

import contextlib
import os
import sys

import flexitest

from common.config import BLOCK_TIME, ServiceType
from common.services import FakeNodeProps, FakeNodeService

FAKENODE_SCRIPT = os.path.join(os.path.dirname(os.path.dirname(__file__)), "nodes", "fakenode.py")


class FakeNodeFactory(flexitest.Factory):
    """
    Factory for creating fake chain nodes.

    Usage:
        factory = FakeNodeFactory(range(21100, 21200))
        node = factory.create_node(block_time=0.5)
        source = node.height_source()
    """

    def __init__(self, port_range: range):
        ports = list(port_range)
        if any(p < 1024 or p > 65535 for p in ports):
            raise ValueError(
                f"FakeNodeFactory: Port range must be between 1024 and 65535. "
                f"Got: {port_range.start}-{port_range.stop - 1}"
            )
        super().__init__(ports)

    @flexitest.with_ectx("ctx")
    def create_node(
        self,
        block_time: float = BLOCK_TIME,
        start_height: int = 0,
        name: str = "node",
        **kwargs,
    ) -> FakeNodeService:
        """
        Create a fake node.

        Args:
            block_time: Seconds between blocks
            start_height: Height at genesis
            name: Service directory and logger name
        """
        # The `with_ectx` ensures this is available.
        ctx: flexitest.EnvContext = kwargs["ctx"]

        datadir = ctx.make_service_dir(f"{ServiceType.FakeNode}_{name}")
        rpc_port = self.next_port()
        logfile = os.path.join(datadir, "service.log")

        cmd = [
            sys.executable,
            FAKENODE_SCRIPT,
            f"--port={rpc_port}",
            f"--datadir={datadir}",
            f"--block-time={block_time}",
            f"--start-height={start_height}",
        ]

        props: FakeNodeProps = {
            "rpc_port": rpc_port,
            "rpc_url": f"http://127.0.0.1:{rpc_port}/rpc",
            "datadir": datadir,
            "block_time": block_time,
        }

        svc = FakeNodeService(props, cmd, stdout=logfile, name=name)
        try:
            svc.start()
        except Exception as e:
            # Ensure cleanup on failure to prevent resource leaks
            with contextlib.suppress(Exception):
                svc.stop()
            raise RuntimeError(f"Failed to start fake node: {e}") from e

        return svc
