"""
Test name injection for logging across the codebase.

Provides a logging filter that automatically tags all logs with the current test name,
so the awaiter's `await.<node>` lines can be attributed to the test that started them.
"""

import logging

_current_test_name: str | None = None

LOG_FORMAT = "%(asctime)s - %(test_name)s - %(name)s - %(levelname)s - %(message)s"


class TestNameFilter(logging.Filter):
    """
    Logging filter that injects current test name into all log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.test_name = _current_test_name or "no-test"
        return True


def set_current_test(test_name: str | None) -> None:
    """
    Set the current test name for logging.

    This is called by the test runtime before each test execution.
    All logs will be tagged with this test name until it's cleared.
    """
    global _current_test_name
    _current_test_name = test_name


def get_test_logger() -> logging.Logger:
    """Logger for harness internals, tagged like everything else."""
    return logging.getLogger(f"test.{_current_test_name or 'harness'}")


def setup_logging(level: str) -> None:
    """Configure root logger with the test name tag on every handler."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.addFilter(TestNameFilter())
