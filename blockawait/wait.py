"""
Waiting helpers for test synchronization.

These wrap `BlockAwaiter` with the conventions test code expects: return the
value on success, raise `AssertionError` when time runs out.
"""

import threading

from blockawait.awaiter import BlockAwaiter
from blockawait.config.constants import MAX_CONSECUTIVE_QUERY_ERRORS
from blockawait.height_source import HeightSource
from blockawait.outcome import BlockAwaitError, Failed, Succeeded, TimedOut
from blockawait.request import AwaitRequest


def wait_for_additional_blocks(
    source: HeightSource,
    offset: int = 1,
    timeout: float | None = 30,
    interval: float = 0.5,
    error_with: str | None = None,
    emit_log: bool = True,
    max_query_errors: int = MAX_CONSECUTIVE_QUERY_ERRORS,
    cancel_event: threading.Event | None = None,
) -> int:
    """
    Wait until `source` reports `offset` more blocks than it does now.

    Returns the height that satisfied the wait.

    Raises:
        AssertionError: If `timeout` seconds pass first
        BlockAwaitError: If the baseline query failed, queries kept failing or
            the wait was cancelled
    """
    request = AwaitRequest(
        offset=offset,
        poll_interval=interval,
        deadline=timeout,
        emit_log=emit_log,
    )
    outcome = BlockAwaiter(
        source,
        request,
        max_query_errors=max_query_errors,
        cancel_event=cancel_event,
    ).run()

    if isinstance(outcome, Succeeded):
        return outcome.final_height
    if isinstance(outcome, TimedOut):
        raise AssertionError(
            error_with
            or f"Timed out waiting for {offset} blocks on {source.name} "
            f"(last height {outcome.last_known_height})"
        )
    assert isinstance(outcome, Failed)
    raise BlockAwaitError(outcome)
