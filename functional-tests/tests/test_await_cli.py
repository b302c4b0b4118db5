"""Run the command line tool against live nodes and check its exit codes."""

import logging
import subprocess
import sys

import flexitest

from common.base_test import FakeNodeTest
from common.config import POLL_INTERVAL

logger = logging.getLogger(__name__)


def run_cli(*args: str) -> int:
    cmd = [sys.executable, "-m", "blockawait.cli", *args]
    logger.info(f"running {cmd}")
    return subprocess.run(cmd, timeout=60).returncode


@flexitest.register
class TestAwaitCli(FakeNodeTest):
    def __init__(self, ctx: flexitest.InitContext):
        ctx.set_env("restartable")

    def main(self, ctx):
        node = self.get_node()
        url = node.props["rpc_url"]

        code = run_cli(
            "offset=2", f"sleep_interval={POLL_INTERVAL}", "timeout=20", f"rpc_url={url}"
        )
        assert code == 0, f"expected success, exit code {code}"

        code = run_cli("--node-kind", "eth", "--rpc-url", url, "-n", "1", "-t", "20", "-q")
        assert code == 0, f"expected success over eth_blockNumber, exit code {code}"

        code = run_cli("offset=1000", "sleep_interval=0.2", "timeout=1", f"rpc_url={url}")
        assert code == 1, f"expected timeout exit code, got {code}"

        node.stop()
        try:
            code = run_cli(f"rpc_url={url}")
        finally:
            node.start()
            node.wait_for_ready(timeout=10, interval=0.2)
        assert code == 2, f"expected failure exit code, got {code}"

        return True
