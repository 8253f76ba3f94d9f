# src/periodic_ticker/task.py

"""
Periodic task driver.

A Task wraps a zero-argument callable that fails by raising. run() calls it
every `interval` seconds until one of:
- the callable raises (the exception propagates unchanged),
- the cancellation token is signaled (its reason is raised),
- the configured limit is reached (run() returns None).

Invocations never overlap. Cancellation is only observed between
invocations, at the wait point.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from .cancellation import CancellationToken
from .errors import InvalidArgumentError, NilFunctionError, NonPositiveIntervalError
from .options import Config, Option, build_config
from .ticker import AsyncTicker, Ticker

logger = logging.getLogger(__name__)

TaskFunc = Callable[[], Any]
Interval = float | int | timedelta


class Task:
    """A function that can be executed periodically."""

    __slots__ = ("func",)

    def __init__(self, func: TaskFunc | None) -> None:
        self.func = func

    def __call__(self) -> Any:
        if self.func is None:
            raise NilFunctionError()
        return self.func()

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"<Task {name}>"

    def run(
        self,
        token: CancellationToken | None,
        interval: Interval,
        *options: Option,
    ) -> None:
        """
        Execute the task periodically, blocking the caller until it stops.

        Options:
        - with_immediate(True): execute once before the ticker starts
        - with_limit(n): at most n executions in total

        Raises NonPositiveIntervalError / NilFunctionError on bad arguments,
        the task's own exception on failure, Canceled / DeadlineExceeded when
        the token is signaled.
        """
        seconds = _interval_seconds(interval)
        func = _task_func(self)
        if inspect.iscoroutinefunction(func):
            raise InvalidArgumentError("invalid argument: coroutine function requires run_async()")
        _drive(func, token, seconds, build_config(options))

    async def run_async(
        self,
        token: CancellationToken | None,
        interval: Interval,
        *options: Option,
    ) -> None:
        """
        asyncio flavour of run().

        The task may be a plain or a coroutine function. Cancelling the
        awaiting asyncio task stops the loop as well (CancelledError propagates).
        """
        seconds = _interval_seconds(interval)
        func = _task_func(self)
        await _drive_async(func, token, seconds, build_config(options))


def new(func: TaskFunc | None) -> Task | None:
    """Wrap func into a Task. None stays None; the error surfaces at run()."""
    if func is None:
        return None
    return Task(func)


def run(
    task: Task | TaskFunc | None,
    token: CancellationToken | None,
    interval: Interval,
    *options: Option,
) -> None:
    """Module-level run(): accepts a Task, a bare callable, or None."""
    _interval_seconds(interval)
    _task_func(task)
    as_task = task if isinstance(task, Task) else Task(task)
    as_task.run(token, interval, *options)


async def run_async(
    task: Task | TaskFunc | None,
    token: CancellationToken | None,
    interval: Interval,
    *options: Option,
) -> None:
    _interval_seconds(interval)
    _task_func(task)
    as_task = task if isinstance(task, Task) else Task(task)
    await as_task.run_async(token, interval, *options)


# ---- validation ----

def _interval_seconds(interval: Interval) -> float:
    if isinstance(interval, timedelta):
        seconds = interval.total_seconds()
    elif isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise InvalidArgumentError(
            f"invalid argument: interval must be seconds or timedelta, got {type(interval).__name__}"
        )
    else:
        seconds = float(interval)

    # `not >` also rejects NaN
    if not seconds > 0:
        raise NonPositiveIntervalError(interval)
    return seconds


def _task_func(task: Task | TaskFunc | None) -> TaskFunc:
    func = task.func if isinstance(task, Task) else task
    if func is None:
        raise NilFunctionError()
    if not callable(func):
        raise InvalidArgumentError(f"invalid argument: task is not callable ({type(func).__name__})")
    return func


# ---- loops ----

def _drive(func: TaskFunc, token: CancellationToken | None, seconds: float, c: Config) -> None:
    if c.limit == 0:
        logger.debug("limit=0; task not executed")
        return

    remaining = c.limit if c.bounded else None
    logger.debug("run start interval=%.3fs immediate=%s limit=%s", seconds, c.immediate, c.limit)

    if c.immediate:
        func()
        if remaining is not None:
            remaining -= 1
            if remaining == 0:
                return

    with Ticker(seconds) as ticker:
        while remaining is None or remaining > 0:
            if not ticker.wait(token):
                logger.debug("run stopped by token: %s", token)
                token.raise_if_cancelled()  # type: ignore[union-attr]
            func()
            if remaining is not None:
                remaining -= 1

    logger.debug("run done: limit of %s reached", c.limit)


async def _drive_async(
    func: TaskFunc,
    token: CancellationToken | None,
    seconds: float,
    c: Config,
) -> None:
    if c.limit == 0:
        logger.debug("limit=0; task not executed")
        return

    remaining = c.limit if c.bounded else None
    logger.debug("async run start interval=%.3fs immediate=%s limit=%s", seconds, c.immediate, c.limit)

    async def invoke() -> None:
        result = func()
        if inspect.isawaitable(result):
            await result

    if c.immediate:
        await invoke()
        if remaining is not None:
            remaining -= 1
            if remaining == 0:
                return

    cancelled: asyncio.Event | None = None
    remove_cb: Callable[[], None] | None = None
    if token is not None:
        cancelled = asyncio.Event()
        loop = asyncio.get_running_loop()

        def _notify() -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(cancelled.set)

        remove_cb = token.add_callback(_notify)

    try:
        async with AsyncTicker(seconds) as ticker:
            while remaining is None or remaining > 0:
                # token state is checked directly: the Event is set one loop iteration late
                if not await ticker.wait(cancelled) or (token is not None and token.cancelled):
                    logger.debug("async run stopped by token: %s", token)
                    token.raise_if_cancelled()  # type: ignore[union-attr]
                await invoke()
                if remaining is not None:
                    remaining -= 1
    finally:
        if remove_cb is not None:
            remove_cb()

    logger.debug("async run done: limit of %s reached", c.limit)
