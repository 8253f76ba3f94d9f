# src/periodic_ticker/cancellation.py

"""
Caller-owned cancellation token.

The driver never creates or owns a token; it only observes it between
task invocations. A token is signaled once, with a reason:
- Canceled: cancel() was called
- DeadlineExceeded: the configured deadline passed
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from .errors import CancellationError, Canceled, DeadlineExceeded

logger = logging.getLogger(__name__)


class CancellationToken:
    def __init__(self, *, timeout: float | None = None, deadline: float | None = None) -> None:
        """
        timeout: seconds from now (relative)
        deadline: time.monotonic() timestamp (absolute)

        If both are given the earlier one wins.
        """
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._reason: CancellationError | None = None
        self._callbacks: list[Callable[[], None]] = []
        self._timer: threading.Timer | None = None

        if timeout is not None:
            by_timeout = time.monotonic() + float(timeout)
            deadline = by_timeout if deadline is None else min(float(deadline), by_timeout)

        self.deadline: float | None = None if deadline is None else float(deadline)
        if self.deadline is not None:
            remaining = self.deadline - time.monotonic()
            if remaining <= 0:
                self._signal(DeadlineExceeded())
            else:
                self._timer = threading.Timer(remaining, self._signal, args=(DeadlineExceeded(),))
                self._timer.daemon = True
                self._timer.start()

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        return cls(timeout=seconds)

    @classmethod
    def with_deadline(cls, deadline: float) -> CancellationToken:
        return cls(deadline=deadline)

    # ---- state ----

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> CancellationError | None:
        return self._reason

    def raise_if_cancelled(self) -> None:
        reason = self._reason
        if reason is not None:
            # Fresh traceback: the same instance is re-raised on every call.
            raise reason.with_traceback(None)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until signaled (or timeout). Returns True if signaled."""
        return self._event.wait(timeout)

    # ---- signaling ----

    def cancel(self) -> None:
        self._signal(Canceled())

    def _signal(self, reason: CancellationError) -> None:
        with self._lock:
            if self._reason is not None:
                return
            self._reason = reason
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
            self._event.set()

        if timer is not None:
            timer.cancel()
        logger.debug("token signaled: %s", reason)

        for cb in callbacks:
            try:
                cb()
            except Exception:
                logger.exception("cancellation callback failed: %r", cb)

    def add_callback(self, fn: Callable[[], None]) -> Callable[[], None]:
        """
        Run fn() once when the token is signaled.

        If already signaled, fn() runs immediately. Returns a remover.
        """
        with self._lock:
            if self._reason is None:
                self._callbacks.append(fn)
                return lambda: self._remove_callback(fn)
        fn()
        return lambda: None

    def _remove_callback(self, fn: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(fn)
            except ValueError:
                pass

    # ---- context manager: leaving the block releases the timer ----

    def __enter__(self) -> CancellationToken:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "active" if self._reason is None else type(self._reason).__name__
        return f"<CancellationToken {state}>"
