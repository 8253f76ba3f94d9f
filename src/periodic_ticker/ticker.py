# src/periodic_ticker/ticker.py

"""
Periodic signal primitives.

Both tickers fire on a fixed-rate schedule into a single slot:
a late consumer sees at most one pending tick, never a backlog.
If the ticker itself falls behind, the missed slots are dropped.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time

from .cancellation import CancellationToken
from .errors import NonPositiveIntervalError

logger = logging.getLogger(__name__)


def _next_slot(next_at: float, now: float, interval: float) -> float:
    next_at += interval
    if next_at <= now:
        next_at += ((now - next_at) // interval + 1) * interval
    return next_at


class Ticker:
    """Thread-backed ticker. Starts on construction; call stop() (or use `with`)."""

    def __init__(self, interval: float) -> None:
        if not interval > 0:
            raise NonPositiveIntervalError(interval)
        self.interval = float(interval)

        self._cond = threading.Condition()
        self._pending = False
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._loop, name="ticker", daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        next_at = time.monotonic() + self.interval
        while not self._stopped.wait(max(0.0, next_at - time.monotonic())):
            with self._cond:
                self._pending = True
                self._cond.notify_all()
            next_at = _next_slot(next_at, time.monotonic(), self.interval)

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def wait(self, token: CancellationToken | None = None) -> bool:
        """
        Block until the next tick or until token is signaled.

        Returns True on tick, False on cancellation. Cancellation wins
        when both are ready.
        """
        remove = token.add_callback(self._wake) if token is not None else None
        try:
            with self._cond:
                while True:
                    if token is not None and token.cancelled:
                        return False
                    if self._pending:
                        self._pending = False
                        return True
                    if self._stopped.is_set():
                        raise RuntimeError("ticker is stopped")
                    self._cond.wait()
        finally:
            if remove is not None:
                remove()

    def stop(self) -> None:
        self._stopped.set()
        self._wake()
        if self._thread is not threading.current_thread():
            self._thread.join()
        logger.debug("ticker stopped interval=%.3fs", self.interval)

    def __enter__(self) -> Ticker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


class AsyncTicker:
    """asyncio ticker. Must be entered (`async with`) inside a running loop."""

    def __init__(self, interval: float) -> None:
        if not interval > 0:
            raise NonPositiveIntervalError(interval)
        self.interval = float(interval)
        self._tick = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self.interval
        while True:
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            self._tick.set()
            next_at = _next_slot(next_at, loop.time(), self.interval)

    async def wait(self, cancelled: asyncio.Event | None = None) -> bool:
        """Same contract as Ticker.wait, with an asyncio.Event as the cancel signal."""
        if self._task is None:
            raise RuntimeError("ticker is not started")

        if cancelled is None:
            await self._tick.wait()
            self._tick.clear()
            return True

        if not (cancelled.is_set() or self._tick.is_set()):
            tick_w = asyncio.ensure_future(self._tick.wait())
            cancel_w = asyncio.ensure_future(cancelled.wait())
            try:
                await asyncio.wait({tick_w, cancel_w}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                tick_w.cancel()
                cancel_w.cancel()

        if cancelled.is_set():
            return False
        self._tick.clear()
        return True

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name="ticker")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("async ticker stopped interval=%.3fs", self.interval)

    async def __aenter__(self) -> AsyncTicker:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
