#!/usr/bin/env python3
"""
Functional test runner for the block awaiter.

Usage:
    ./entry.py                          # Run all tests
    ./entry.py -t test_await_timeout    # Run specific test(s)
"""

import argparse
import os
import sys

import flexitest

from common.config import BLOCK_TIME, ServiceType
from common.runtime import TestRuntimeWithLogging
from common.test_logging import setup_logging
from envconfigs import FakeNodeEnvConfig
from factories import FakeNodeFactory

# Blocks are produced so rarely here that every wait times out.
STALLED_BLOCK_TIME = 3600.0


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="entry.py",
        description="Run functional tests",
    )
    parser.add_argument(
        "-t",
        "--test",
        nargs="*",
        help="Run specific test(s), by file name",
    )
    return parser.parse_args(argv[1:])


def filter_tests(args: argparse.Namespace, modules: dict[str, str]) -> dict[str, str]:
    """Keep the modules named with --test. Paths and a .py suffix are accepted."""
    wanted = frozenset(os.path.basename(t).removesuffix(".py") for t in args.test or [])
    if not wanted:
        return modules
    unknown = wanted - modules.keys()
    if unknown:
        raise SystemExit(f"unknown test(s): {', '.join(sorted(unknown))}")
    return {name: path for name, path in modules.items() if name in wanted}


def main(argv: list[str]) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(os.getenv("LOG_LEVEL", "INFO").upper())

    # Create factories
    factories: dict[ServiceType, flexitest.Factory] = {
        ServiceType.FakeNode: FakeNodeFactory(range(21100, 21200)),
    }

    # Define global environments
    global_envs: dict[str, flexitest.EnvConfig] = {
        "basic": FakeNodeEnvConfig(block_time=BLOCK_TIME, start_height=100),
        "stalled": FakeNodeEnvConfig(block_time=STALLED_BLOCK_TIME, start_height=7),
        # Tests in here stop and start the node.
        "restartable": FakeNodeEnvConfig(block_time=BLOCK_TIME),
    }

    # Set up test runtime
    root_dir = os.path.dirname(os.path.abspath(__file__))
    datadir = flexitest.create_datadir_in_workspace(os.path.join(root_dir, "_dd"))
    runtime = TestRuntimeWithLogging(global_envs, datadir, factories)

    # Discover tests
    test_dir = os.path.join(root_dir, "tests")
    modules = filter_tests(args, flexitest.runtime.scan_dir_for_modules(test_dir))
    tests = flexitest.runtime.load_candidate_modules(modules)

    # Run tests
    runtime.prepare_registered_tests()
    results = runtime.run_tests(tests)

    # Save and display results
    runtime.save_json_file("results.json", results)
    flexitest.dump_results(results)

    # Exit with error if any test failed
    flexitest.fail_on_error(results)

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
