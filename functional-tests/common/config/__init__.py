"""
Constants for the functional test suite.
"""

from common.config.constants import BLOCK_TIME, POLL_INTERVAL, ServiceType

__all__ = [
    "BLOCK_TIME",
    "POLL_INTERVAL",
    "ServiceType",
]
