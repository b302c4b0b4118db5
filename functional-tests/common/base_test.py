"""
Base test class with common utilities.
"""

import flexitest

from common.config import ServiceType
from common.services import FakeNodeService


class BaseTest(flexitest.Test):
    """
    Base class for all functional tests.

    Tests should explicitly:
    - Get services from ctx.get_service()
    - Build height sources from them
    """

    def premain(self, ctx: flexitest.RunContext):
        """
        Things that need to be done before we run the test.
        """
        self.runctx = ctx

    def main(self, ctx) -> bool:  # type: ignore[override]
        raise NotImplementedError


class FakeNodeTest(BaseTest):
    """
    Base Test class for tests that await blocks on a fake node.
    """

    def get_node(self) -> FakeNodeService:
        svc = self.runctx.get_service(ServiceType.FakeNode)
        if svc is None:
            raise RuntimeError(
                f"Service '{ServiceType.FakeNode}' not found. Available services: "
                f"{list(self.runctx.env.services.keys())}"  # type: ignore[union-attr]
            )
        return svc
