"""Environment configurations for functional tests."""

from envconfigs.fakenode import FakeNodeEnvConfig

__all__ = ["FakeNodeEnvConfig"]
