"""
Core library for functional tests.
Provides the fake node service, its factory plumbing and waiting utilities.
"""

from .config import ServiceType
from .wait import wait_until

__all__ = [
    "ServiceType",
    "wait_until",
]
