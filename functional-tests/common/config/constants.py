"""
Constants used throughout the functional test suite.
"""

from enum import Enum


class ServiceType(str, Enum):
    """
    Service type identifiers for test environments.

    Using str Enum allows direct string comparison while providing
    IDE autocomplete and type safety.

    Usage:
        services = {ServiceType.FakeNode: node}
        node = self.get_service(ServiceType.FakeNode)
    """

    FakeNode = "fakenode"

    def __str__(self) -> str:
        """Allow direct use in f-strings and format operations."""
        return self.value


# Block time of the default environment, seconds.
BLOCK_TIME = 0.5

# Polling interval used by the tests, well under one block time.
POLL_INTERVAL = 0.2
