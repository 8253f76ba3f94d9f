# src/periodic_ticker/errors.py

"""
Error taxonomy.

Three kinds of failure share the same channel (an exception out of run()):
- InvalidArgumentError: caller misuse, raised before any work is done
- CancellationError: the caller's token was signaled (Canceled / DeadlineExceeded)
- anything else: the task's own exception, re-raised as-is
"""

from __future__ import annotations


class TickerError(Exception):
    """Base class for errors raised by the driver itself."""


class InvalidArgumentError(TickerError, ValueError):
    """An invalid argument was provided to run()."""

    def __init__(self, message: str = "invalid argument") -> None:
        super().__init__(message)


class NonPositiveIntervalError(InvalidArgumentError):
    def __init__(self, interval: object = None) -> None:
        msg = "invalid argument: non-positive interval"
        if interval is not None:
            msg = f"{msg} ({interval!r})"
        super().__init__(msg)
        self.interval = interval


class NilFunctionError(InvalidArgumentError):
    def __init__(self) -> None:
        super().__init__("invalid argument: function must not be None")


class CancellationError(TickerError):
    """The cancellation token was signaled before the run finished."""


class Canceled(CancellationError):
    def __init__(self, message: str = "canceled") -> None:
        super().__init__(message)


class DeadlineExceeded(CancellationError, TimeoutError):
    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)
