"""
Service wrappers for test infrastructure.
"""

from common.services.base import RpcService
from common.services.fakenode import FakeNodeProps, FakeNodeService

__all__ = [
    "RpcService",
    "FakeNodeService",
    "FakeNodeProps",
]
