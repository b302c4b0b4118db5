"""Environment configurations."""

from typing import cast

import flexitest

from common.config import BLOCK_TIME, ServiceType
from factories.fakenode import FakeNodeFactory


class FakeNodeEnvConfig(flexitest.EnvConfig):
    """
    One fake node producing a block every `block_time` seconds.
    """

    def __init__(self, block_time: float = BLOCK_TIME, start_height: int = 0):
        self.block_time = block_time
        self.start_height = start_height

    def init(self, ectx: flexitest.EnvContext) -> flexitest.LiveEnv:
        factory = cast(FakeNodeFactory, ectx.get_factory(ServiceType.FakeNode))

        node = factory.create_node(block_time=self.block_time, start_height=self.start_height)
        node.wait_for_ready(timeout=10, interval=0.2)

        return flexitest.LiveEnv({ServiceType.FakeNode: node})
