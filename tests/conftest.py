import threading

import pytest
import requests

from blockawait.height_source import QueryError


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> None:
        self.now += dt


class InstantSleepEvent(threading.Event):
    """Cancel event whose `wait()` advances a fake clock instead of blocking."""

    def __init__(self, clock: FakeClock):
        super().__init__()
        self.clock = clock
        self.sleeps: list[float] = []

    def wait(self, timeout=None):
        if self.is_set():
            return True
        self.sleeps.append(timeout)
        self.clock.advance(timeout or 0)
        return self.is_set()


class ScriptedSource:
    """
    Replays a script of heights and errors, one entry per query.

    Ints are returned, exceptions are raised. The last entry repeats once the
    script runs out. `query_cost` advances the clock on every call.
    """

    def __init__(self, script, name="scripted", clock=None, query_cost=0.0):
        if not script:
            raise ValueError("empty script")
        self.script = list(script)
        self.name = name
        self.clock = clock
        self.query_cost = query_cost
        self.calls = 0

    def query(self) -> int:
        idx = min(self.calls, len(self.script) - 1)
        self.calls += 1
        if self.clock is not None:
            self.clock.advance(self.query_cost)
        item = self.script[idx]
        if isinstance(item, BaseException):
            raise item
        return item


class CountingSource:
    """Height starts at `start` and grows by `step` on every query."""

    def __init__(self, start=0, step=1, name="counting"):
        self.height = start - step
        self.step = step
        self.name = name
        self.calls = 0

    def query(self) -> int:
        self.calls += 1
        self.height += self.step
        return self.height


class FakeResponse:
    def __init__(self, body=None, status=200, text=None):
        self._body = body
        self.status_code = status
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.text is not None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    """Stands in for `requests.Session`, answers POSTs with the queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.payloads = []
        self.closed = False

    def close(self):
        self.closed = True

    def post(self, url, json=None, timeout=None):
        self.payloads.append(json)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return item


def query_error(msg="connection refused"):
    return QueryError(msg)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeper(clock):
    return InstantSleepEvent(clock)
