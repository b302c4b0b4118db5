"""Service factories for creating test services."""

from factories.fakenode import FakeNodeFactory

__all__ = ["FakeNodeFactory"]
