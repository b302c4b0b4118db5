"""
Immutable parameters of one block wait.
"""

import math
from dataclasses import dataclass, field

from blockawait.config.constants import DEFAULT_DEADLINE, DEFAULT_OFFSET, DEFAULT_POLL_INTERVAL


@dataclass(frozen=True)
class AwaitRequest:
    """
    What to wait for and how often to look.

    Attributes:
        offset: Blocks to wait for beyond the baseline height. 0 succeeds immediately.
        poll_interval: Seconds between successive height queries.
        deadline: Maximum seconds to wait, or None to wait indefinitely.
        emit_log: Log every observed height at INFO instead of DEBUG.
    """

    offset: int = field(default=DEFAULT_OFFSET)
    poll_interval: float = field(default=DEFAULT_POLL_INTERVAL)
    deadline: float | None = field(default=DEFAULT_DEADLINE)
    emit_log: bool = field(default=True)

    def __post_init__(self):
        if isinstance(self.offset, bool) or not isinstance(self.offset, int):
            raise ValueError(f"offset must be an integer, got {self.offset!r}")
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if not (self.poll_interval > 0 and math.isfinite(self.poll_interval)):
            raise ValueError(f"poll_interval must be positive and finite, got {self.poll_interval}")
        if self.deadline is not None and not (self.deadline > 0 and math.isfinite(self.deadline)):
            raise ValueError(f"deadline must be positive and finite when set, got {self.deadline}")
