"""
Command line wrapper around the block awaiter.

Usage:
    await-n-blocks                              # wait for the next block
    await-n-blocks offset=5 timeout=120         # key=value form
    await-n-blocks --offset 5 --node-kind eth --rpc-url http://localhost:8545
"""

import argparse
import logging
import os
import signal
import sys
import threading

from blockawait.awaiter import BlockAwaiter
from blockawait.config import AwaitConfig, ConfigError, NodeKind, load_config
from blockawait.height_source import make_height_source
from blockawait.outcome import Failed, FailureCause, PollOutcome, Succeeded, TimedOut, describe

logger = logging.getLogger("await-n-blocks")

EXIT_OK = 0
EXIT_TIMED_OUT = 1
EXIT_FAILED = 2
EXIT_USAGE = 64
EXIT_CANCELLED = 130


def setup_logging() -> None:
    """Configure root logger."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class ArgumentParser(argparse.ArgumentParser):
    """Reports bad flags with the same exit code as bad key=value settings."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = ArgumentParser(
        prog="await-n-blocks",
        description="Wait until a node's chain height advances by N blocks",
    )
    parser.add_argument(
        "assignments",
        nargs="*",
        metavar="KEY=VALUE",
        help="offset=, sleep_interval=, timeout=, emit_log=, rpc_url=, node_kind=",
    )
    parser.add_argument("-n", "--offset", type=int, help="Blocks to wait for (default 1)")
    parser.add_argument(
        "-i",
        "--sleep-interval",
        type=float,
        help="Seconds between height queries",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        help="Give up after this many seconds (0 or unset waits forever)",
    )
    parser.add_argument("-u", "--rpc-url", help="Node JSON-RPC endpoint")
    parser.add_argument(
        "-k",
        "--node-kind",
        choices=[k.value for k in NodeKind],
        help="Which RPC to ask for the chain height",
    )
    parser.add_argument("-c", "--config", help="TOML file with an [await] table")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log the result, not every observed height",
    )
    return parser.parse_intermixed_args(argv[1:])


def build_config(args: argparse.Namespace) -> AwaitConfig:
    overrides = {
        "offset": args.offset,
        "sleep_interval": args.sleep_interval,
        "timeout": args.timeout,
        "rpc_url": args.rpc_url,
        "node_kind": args.node_kind,
        "emit_log": False if args.quiet else None,
    }
    # argparse leaves unset options as None, merge() skips those.
    return load_config(args.config, args.assignments, overrides)


def exit_code_for(outcome: PollOutcome) -> int:
    if isinstance(outcome, Succeeded):
        return EXIT_OK
    if isinstance(outcome, TimedOut):
        return EXIT_TIMED_OUT
    assert isinstance(outcome, Failed)
    if outcome.cause is FailureCause.Cancelled:
        return EXIT_CANCELLED
    return EXIT_FAILED


def install_cancel_handlers(cancel: threading.Event) -> dict:
    """Route SIGINT and SIGTERM to `cancel`. Returns the previous handlers."""

    def _handler(signum, _frame):
        logger.warning(f"received signal {signum}, cancelling wait")
        cancel.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handler)
    return previous


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(sys.argv if argv is None else argv)
    setup_logging()

    try:
        cfg = build_config(args)
        request = cfg.to_request()
    except ConfigError as e:
        logger.error(f"invalid configuration: {e}")
        return EXIT_USAGE

    source = make_height_source(cfg.node_kind, cfg.rpc_url, timeout=cfg.rpc_timeout)
    cancel = threading.Event()
    previous = {}
    if threading.current_thread() is threading.main_thread():
        previous = install_cancel_handlers(cancel)

    logger.info(
        f"awaiting {request.offset} block(s) on {source.name} "
        f"(interval {request.poll_interval}s, timeout {request.deadline or 'none'})"
    )
    try:
        outcome = BlockAwaiter(source, request, cancel_event=cancel).run()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        close = getattr(source, "close", None)
        if close is not None:
            close()

    code = exit_code_for(outcome)
    log = logger.info if code == EXIT_OK else logger.error
    log(describe(outcome))
    return code


if __name__ == "__main__":
    sys.exit(main(sys.argv))
