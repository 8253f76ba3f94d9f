# src/periodic_ticker/cli/main.py

"""
CLI entrypoint.

Runs a shell command periodically:

    periodic-ticker --interval 5 --limit 10 --immediate -- curl -fsS http://localhost/health

Initializes logging, builds a CancellationToken (optionally with a timeout),
wires SIGINT/SIGTERM to token.cancel(), then blocks in Task.run().
"""

from __future__ import annotations

import argparse
import logging
import signal
import subprocess
import threading
from collections.abc import Sequence

from ..cancellation import CancellationToken
from ..config import Settings, get_settings
from ..errors import Canceled, DeadlineExceeded, InvalidArgumentError
from ..logging_setup import setup_logging
from ..options import with_immediate, with_limit
from ..task import Task, new, run

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_DEADLINE_EXCEEDED = 124
EXIT_CANCELED = 130


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="periodic-ticker",
        description="Run a command at a fixed interval until it fails, is cancelled, or hits a limit.",
    )
    p.add_argument("--interval", type=float, default=settings.interval_seconds,
                   help="seconds between runs (default: %(default)s)")
    p.add_argument("--limit", type=int, default=settings.limit,
                   help="max number of runs; 0 = none, negative = unbounded (default: %(default)s)")
    p.add_argument("--immediate", action=argparse.BooleanOptionalAction, default=settings.immediate,
                   help="run once before the first interval elapses")
    p.add_argument("--timeout", type=float, default=settings.timeout_seconds,
                   help="stop after this many seconds (default: no timeout)")
    p.add_argument("command", nargs=argparse.REMAINDER, help="command to run (prefix with --)")
    return p


def command_task(command: Sequence[str]) -> Task | None:
    """A Task that runs `command` and raises CalledProcessError on non-zero exit."""
    if not command:
        return new(None)

    argv = list(command)

    def _run_command() -> None:
        logger.debug("exec %s", argv)
        subprocess.run(argv, check=True)

    return new(_run_command)


def exit_status(returncode: int) -> int:
    """Map a child return code to our exit code (killed by signal N -> 128 + N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode or EXIT_TASK_FAILED


def install_signal_handlers(token: CancellationToken) -> dict[int, object]:
    """
    Route SIGINT/SIGTERM to token.cancel(). Returns the previous handlers.

    The handler runs on the main thread, which may be holding the token's lock
    (Ticker.wait registers a callback every tick), so cancel() runs on its own thread.
    """

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, stopping...", signum)
        threading.Thread(target=token.cancel, name="ticker-cancel", daemon=True).start()

    previous: dict[int, object] = {}
    try:
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, _handle_signal)
    except ValueError:
        # Not in the main thread (e.g. embedded use): rely on --timeout only.
        logger.debug("signal handlers not installed")
    return previous


def restore_signal_handlers(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_cli(argv: Sequence[str] | None = None, *, settings: Settings | None = None) -> int:
    if settings is None:
        settings = get_settings()

    args = build_parser(settings).parse_args(argv)
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]

    task = command_task(command)
    token = CancellationToken(timeout=args.timeout)

    previous = install_signal_handlers(token)

    options = [with_immediate(args.immediate), with_limit(args.limit)]
    try:
        with token:
            run(task, token, args.interval, *options)
    except InvalidArgumentError as e:
        logger.error("%s", e)
        return EXIT_INVALID_ARGUMENT
    except DeadlineExceeded:
        logger.info("Timeout reached after %ss.", args.timeout)
        return EXIT_DEADLINE_EXCEEDED
    except Canceled:
        logger.info("Cancelled.")
        return EXIT_CANCELED
    except subprocess.CalledProcessError as e:
        logger.error("Command failed with exit status %s: %s", e.returncode, command)
        return exit_status(e.returncode)
    except OSError as e:
        logger.error("Command could not be started: %s", e)
        return EXIT_TASK_FAILED
    finally:
        restore_signal_handlers(previous)

    logger.info("Done.")
    return EXIT_OK


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    raise SystemExit(run_cli(settings=settings))


if __name__ == "__main__":
    main()
