"""Query failures while the node restarts are retried, a node that stays down is not."""

import logging
import threading
import time

import flexitest

from blockawait import AwaitRequest, BlockAwaiter, Failed, FailureCause, Succeeded
from common.base_test import FakeNodeTest
from common.config import POLL_INTERVAL

logger = logging.getLogger(__name__)


@flexitest.register
class TestAwaitNodeRestart(FakeNodeTest):
    def __init__(self, ctx: flexitest.InitContext):
        ctx.set_env("restartable")

    def main(self, ctx):
        node = self.get_node()

        def _restart():
            time.sleep(0.5)
            logger.info("stopping node")
            node.stop()
            time.sleep(1.0)
            logger.info("starting node")
            node.start()

        restarter = threading.Thread(target=_restart)
        restarter.start()
        try:
            outcome = BlockAwaiter(
                node.height_source(),
                AwaitRequest(offset=6, poll_interval=POLL_INTERVAL, deadline=20),
                max_query_errors=20,
            ).run()
        finally:
            restarter.join()

        assert isinstance(outcome, Succeeded), f"expected success across restart, got {outcome}"
        node.wait_for_ready(timeout=10, interval=0.2)

        # Now keep it down for longer than the retry budget allows.
        source = node.height_source()
        awaiter = BlockAwaiter(
            source,
            AwaitRequest(offset=100, poll_interval=POLL_INTERVAL, deadline=20),
            max_query_errors=2,
        )
        stopper = threading.Timer(0.3, node.stop)
        stopper.start()
        try:
            outcome = awaiter.run()
        finally:
            stopper.join()
            node.start()
            node.wait_for_ready(timeout=10, interval=0.2)

        assert isinstance(outcome, Failed), f"expected failure, got {outcome}"
        assert outcome.cause is FailureCause.RepeatedQueryFailure
        assert awaiter.state.consecutive_query_errors == 3
        return True
