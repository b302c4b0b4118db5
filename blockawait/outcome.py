"""
Terminal results of a block wait.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class FailureCause(str, Enum):
    """Why a wait ended in `Failed`."""

    BaselineQueryFailed = "baseline_query_failed"
    RepeatedQueryFailure = "repeated_query_failure"
    Cancelled = "cancelled"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Succeeded:
    final_height: int
    elapsed: float
    polls: int = 0

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class TimedOut:
    last_known_height: int
    elapsed: float
    polls: int = 0

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    cause: FailureCause
    error: Exception | None = field(default=None, compare=False)
    elapsed: float = 0.0
    polls: int = 0

    @property
    def ok(self) -> bool:
        return False


PollOutcome = Union[Succeeded, TimedOut, Failed]


def describe(outcome: PollOutcome) -> str:
    """One-line human readable summary of an outcome."""
    if isinstance(outcome, Succeeded):
        return f"reached height {outcome.final_height} after {outcome.elapsed:.1f}s"
    if isinstance(outcome, TimedOut):
        return (
            f"timed out after {outcome.elapsed:.1f}s, "
            f"last known height {outcome.last_known_height}"
        )
    if outcome.error is not None:
        return f"failed ({outcome.cause}): {outcome.error}"
    return f"failed ({outcome.cause})"


class BlockAwaitError(Exception):
    """Raised by the harness helpers when a wait ends in `Failed`."""

    def __init__(self, outcome: Failed):
        self.outcome = outcome
        super().__init__(describe(outcome))
