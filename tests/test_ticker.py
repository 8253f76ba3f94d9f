# tests/test_ticker.py

from __future__ import annotations

import asyncio
import time

import pytest

from periodic_ticker.cancellation import CancellationToken
from periodic_ticker.errors import NonPositiveIntervalError
from periodic_ticker.ticker import AsyncTicker, Ticker

from .fakes import ticker_threads


def test_ticker_rejects_non_positive_interval() -> None:
    with pytest.raises(NonPositiveIntervalError):
        Ticker(0)
    with pytest.raises(NonPositiveIntervalError):
        AsyncTicker(-1)


def test_first_tick_after_full_interval() -> None:
    started = time.monotonic()
    with Ticker(0.05) as ticker:
        assert ticker.wait() is True
    assert time.monotonic() - started >= 0.045


def test_late_consumer_sees_one_tick_not_a_backlog() -> None:
    with Ticker(0.05) as ticker:
        # Mid-slot, after three ticks have fired.
        time.sleep(0.175)

        t0 = time.monotonic()
        assert ticker.wait() is True
        first = time.monotonic() - t0

        t1 = time.monotonic()
        assert ticker.wait() is True
        second = time.monotonic() - t1

    assert first < 0.01
    assert second >= 0.005


def test_cancellation_wins_over_pending_tick() -> None:
    token = CancellationToken()
    with Ticker(0.01) as ticker:
        time.sleep(0.03)
        token.cancel()
        assert ticker.wait(token) is False


def test_wait_wakes_up_on_cancel() -> None:
    token = CancellationToken.with_timeout(0.02)
    started = time.monotonic()
    with Ticker(10.0) as ticker:
        assert ticker.wait(token) is False
    assert time.monotonic() - started < 1.0


def test_stop_releases_thread() -> None:
    ticker = Ticker(0.01)
    assert ticker_threads()
    ticker.stop()

    assert ticker_threads() == []
    with pytest.raises(RuntimeError):
        ticker.wait()


@pytest.mark.asyncio
async def test_async_ticker_ticks_and_stops() -> None:
    started = time.monotonic()
    async with AsyncTicker(0.02) as ticker:
        assert await ticker.wait() is True
        assert await ticker.wait() is True
    assert time.monotonic() - started >= 0.035

    with pytest.raises(RuntimeError):
        await ticker.wait()


@pytest.mark.asyncio
async def test_async_ticker_cancel_event_wins() -> None:
    cancelled = asyncio.Event()
    async with AsyncTicker(0.01) as ticker:
        await asyncio.sleep(0.03)
        cancelled.set()
        assert await ticker.wait(cancelled) is False
