"""
Custom test runtime that tags log lines with the running test.
"""

import logging

import flexitest

from common.test_logging import set_current_test

logger = logging.getLogger(__name__)


class TestRuntimeWithLogging(flexitest.TestRuntime):
    """
    TestRuntime that sets the current test name for automatic log tagging.
    """

    def _exec_test(self, test_name: str, env):
        set_current_test(test_name)
        logger.info("starting")
        try:
            return super()._exec_test(test_name, env)
        finally:
            logger.info("finished")
            set_current_test(None)
