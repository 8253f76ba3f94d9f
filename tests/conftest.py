# tests/conftest.py

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

from periodic_ticker.cancellation import CancellationToken
from periodic_ticker.config import Settings

from .fakes import AsyncCountingTask, CountingTask


@pytest.fixture()
def counter() -> CountingTask:
    return CountingTask()


@pytest.fixture()
def async_counter() -> AsyncCountingTask:
    return AsyncCountingTask()


@pytest.fixture()
def token() -> Iterator[CancellationToken]:
    """A fresh token, cancelled on teardown so no timer outlives the test."""
    tok = CancellationToken()
    yield tok
    tok.cancel()


@pytest.fixture()
def cancel_after():
    """cancel_after(token, seconds): cancel a token from another thread."""
    timers: list[threading.Timer] = []

    def _schedule(tok: CancellationToken, seconds: float) -> None:
        t = threading.Timer(seconds, tok.cancel)
        t.daemon = True
        t.start()
        timers.append(t)

    yield _schedule

    for t in timers:
        t.cancel()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Explicit settings for CLI tests.

    Built directly rather than from the environment, to keep tests deterministic.
    """
    return Settings(
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        interval_seconds=1.0,
        limit=-1,
        immediate=False,
        timeout_seconds=None,
    )

