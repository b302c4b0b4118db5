import pytest

from blockawait.height_source import NodeUnreachableError
from blockawait.outcome import BlockAwaitError, FailureCause
from blockawait.wait import wait_for_additional_blocks
from conftest import CountingSource, ScriptedSource


def test_returns_final_height():
    height = wait_for_additional_blocks(CountingSource(start=50), offset=2, interval=0.01)
    assert height == 52


def test_zero_offset_returns_current_height():
    source = ScriptedSource([8])
    assert wait_for_additional_blocks(source, offset=0, interval=0.01) == 8
    assert source.calls == 1


def test_timeout_raises_assertion_error():
    with pytest.raises(AssertionError, match="last height 3"):
        wait_for_additional_blocks(ScriptedSource([3]), offset=1, timeout=0.05, interval=0.01)


def test_timeout_uses_custom_message():
    with pytest.raises(AssertionError, match="sequencer stalled"):
        wait_for_additional_blocks(
            ScriptedSource([3]),
            timeout=0.05,
            interval=0.01,
            error_with="sequencer stalled",
        )


def test_baseline_failure_raises():
    source = ScriptedSource([NodeUnreachableError("connection refused")])
    with pytest.raises(BlockAwaitError) as exc_info:
        wait_for_additional_blocks(source, interval=0.01)

    assert exc_info.value.outcome.cause is FailureCause.BaselineQueryFailed
    assert "connection refused" in str(exc_info.value)


def test_repeated_failure_raises():
    source = ScriptedSource([1, NodeUnreachableError("gone")])
    with pytest.raises(BlockAwaitError) as exc_info:
        wait_for_additional_blocks(source, interval=0.01, max_query_errors=1)

    assert exc_info.value.outcome.cause is FailureCause.RepeatedQueryFailure
    assert exc_info.value.outcome.polls == 2
