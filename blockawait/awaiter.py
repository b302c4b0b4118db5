"""
Wait for a node's chain height to advance by a given number of blocks.

The wait is a small state machine:

    Init -> BaselineCaptured -> Polling -> Succeeded | TimedOut | Failed

One query fixes the baseline and the target (`baseline + offset`). After that
the awaiter sleeps `poll_interval`, queries again and compares against the
target until it is reached, the deadline passes, too many queries fail in a
row, or the wait is cancelled.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from blockawait.config.constants import MAX_CONSECUTIVE_QUERY_ERRORS
from blockawait.height_source import HeightSource, QueryError
from blockawait.outcome import Failed, FailureCause, PollOutcome, Succeeded, TimedOut
from blockawait.request import AwaitRequest


class Phase(Enum):
    Init = 0
    BaselineCaptured = 1
    Polling = 2
    Succeeded = 3
    TimedOut = 4
    Failed = 5

    @property
    def terminal(self) -> bool:
        return self in (Phase.Succeeded, Phase.TimedOut, Phase.Failed)


@dataclass
class AwaitState:
    """Mutable bookkeeping of one in-flight wait."""

    phase: Phase = Phase.Init
    baseline: int | None = None
    target: int | None = None
    started_at: float | None = None
    last_height: int | None = None
    consecutive_query_errors: int = 0
    polls: int = 0
    last_error: QueryError | None = field(default=None, repr=False)

    def advance(self, phase: Phase) -> None:
        if self.phase.terminal or phase.value <= self.phase.value:
            raise RuntimeError(f"invalid transition {self.phase.name} -> {phase.name}")
        self.phase = phase


class BlockAwaiter:
    """
    Runs one wait against one height source.

    An instance is single use: `run()` may be called once. Separate instances
    share nothing and can run concurrently against the same node.

    Usage:
        source = make_height_source("casper", "http://localhost:11101/rpc")
        outcome = BlockAwaiter(source, AwaitRequest(offset=3, deadline=60)).run()
        if isinstance(outcome, Succeeded):
            ...
    """

    def __init__(
        self,
        source: HeightSource,
        request: AwaitRequest | None = None,
        *,
        max_query_errors: int = MAX_CONSECUTIVE_QUERY_ERRORS,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_query_errors < 0:
            raise ValueError(f"max_query_errors must be non-negative, got {max_query_errors}")

        self.source = source
        self.request = request or AwaitRequest()
        self.max_query_errors = max_query_errors
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock
        self.state = AwaitState()
        self.logger = logging.getLogger(f"await.{getattr(source, 'name', 'source')}")

    def run(self) -> PollOutcome:
        if self.state.phase is not Phase.Init:
            raise RuntimeError("BlockAwaiter.run() can only be called once")

        outcome = self._capture_baseline()
        if outcome is not None:
            return outcome

        self.state.advance(Phase.Polling)
        return self._poll()

    def _capture_baseline(self) -> PollOutcome | None:
        st = self.state
        try:
            baseline = self.source.query()
        except QueryError as e:
            self.logger.error(f"could not fetch baseline height: {e}")
            st.last_error = e
            st.advance(Phase.Failed)
            return Failed(FailureCause.BaselineQueryFailed, error=e)

        st.baseline = baseline
        st.last_height = baseline
        st.target = baseline + self.request.offset
        st.started_at = self.clock()
        st.advance(Phase.BaselineCaptured)

        self._progress(f"baseline height {baseline}, waiting for height {st.target}")
        return None

    def _poll(self) -> PollOutcome:
        st = self.state
        req = self.request

        # The baseline already satisfies a zero offset.
        if req.offset == 0:
            return self._succeed(st.baseline)

        while True:
            if self.cancel_event.is_set():
                return self._fail(FailureCause.Cancelled)

            remaining = self._remaining()
            if remaining is not None and remaining <= 0:
                return self._time_out()

            delay = req.poll_interval if remaining is None else min(req.poll_interval, remaining)
            if self.cancel_event.wait(delay):
                return self._fail(FailureCause.Cancelled)

            st.polls += 1
            try:
                height = self.source.query()
            except QueryError as e:
                st.last_error = e
                st.consecutive_query_errors += 1
                self.logger.warning(
                    f"height query failed ({st.consecutive_query_errors} in a row, "
                    f"limit {self.max_query_errors}): {e}"
                )
                if st.consecutive_query_errors > self.max_query_errors:
                    return self._fail(FailureCause.RepeatedQueryFailure)
                continue

            st.consecutive_query_errors = 0
            if height < st.last_height:
                self.logger.warning(f"height went backwards: {st.last_height} -> {height}")
            st.last_height = height

            if height >= st.target:
                return self._succeed(height)

            self._progress(f"at height {height}, waiting for {st.target}")

    def _remaining(self) -> float | None:
        if self.request.deadline is None:
            return None
        return self.request.deadline - self._elapsed()

    def _elapsed(self) -> float:
        if self.state.started_at is None:
            return 0.0
        return self.clock() - self.state.started_at

    def _progress(self, msg: str) -> None:
        level = logging.INFO if self.request.emit_log else logging.DEBUG
        self.logger.log(level, msg)

    def _succeed(self, height: int) -> Succeeded:
        self.state.advance(Phase.Succeeded)
        elapsed = self._elapsed()
        self._progress(f"reached height {height} (target {self.state.target}) in {elapsed:.1f}s")
        return Succeeded(final_height=height, elapsed=elapsed, polls=self.state.polls)

    def _time_out(self) -> TimedOut:
        st = self.state
        st.advance(Phase.TimedOut)
        elapsed = self._elapsed()
        self.logger.warning(
            f"timed out after {elapsed:.1f}s at height {st.last_height}, target was {st.target}"
        )
        return TimedOut(last_known_height=st.last_height, elapsed=elapsed, polls=st.polls)

    def _fail(self, cause: FailureCause) -> Failed:
        st = self.state
        st.advance(Phase.Failed)
        error = st.last_error if cause is FailureCause.RepeatedQueryFailure else None
        self.logger.error(f"wait failed ({cause}) at height {st.last_height}")
        return Failed(cause, error=error, elapsed=self._elapsed(), polls=st.polls)


def await_blocks(
    source: HeightSource,
    request: AwaitRequest | None = None,
    **kwargs,
) -> PollOutcome:
    """Run a single wait and return its outcome. Keyword arguments go to `BlockAwaiter`."""
    return BlockAwaiter(source, request, **kwargs).run()
