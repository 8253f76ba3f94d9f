# tests/test_cancellation.py

from __future__ import annotations

import logging
import time

import pytest

from periodic_ticker.cancellation import CancellationToken
from periodic_ticker.errors import CancellationError, Canceled, DeadlineExceeded


def test_fresh_token_is_not_cancelled(token) -> None:
    assert not token.cancelled
    assert token.reason is None
    token.raise_if_cancelled()
    assert token.wait(0.01) is False


def test_cancel_sets_reason_once(token) -> None:
    token.cancel()
    first = token.reason
    token.cancel()

    assert token.cancelled
    assert isinstance(first, Canceled)
    assert token.reason is first
    with pytest.raises(Canceled):
        token.raise_if_cancelled()


def test_timeout_signals_deadline_exceeded() -> None:
    token = CancellationToken.with_timeout(0.02)
    assert token.wait(1.0)

    assert isinstance(token.reason, DeadlineExceeded)
    assert isinstance(token.reason, TimeoutError)
    assert isinstance(token.reason, CancellationError)

    # First reason wins.
    token.cancel()
    assert isinstance(token.reason, DeadlineExceeded)


def test_deadline_in_the_past_is_signaled_immediately() -> None:
    token = CancellationToken.with_deadline(time.monotonic() - 1)
    assert token.cancelled
    assert isinstance(token.reason, DeadlineExceeded)


def test_earlier_of_timeout_and_deadline_wins() -> None:
    token = CancellationToken(timeout=60, deadline=time.monotonic() + 0.01)
    try:
        assert token.deadline is not None
        assert token.deadline - time.monotonic() < 1
    finally:
        token.cancel()


def test_callbacks_run_on_signal_and_can_be_removed(token) -> None:
    calls: list[str] = []
    token.add_callback(lambda: calls.append("a"))
    remove_b = token.add_callback(lambda: calls.append("b"))
    remove_b()

    token.cancel()
    token.cancel()

    assert calls == ["a"]


def test_callback_on_signaled_token_runs_immediately(token) -> None:
    token.cancel()
    calls: list[int] = []
    token.add_callback(lambda: calls.append(1))
    assert calls == [1]


def test_context_manager_cancels_on_exit() -> None:
    with CancellationToken.with_timeout(60) as token:
        assert not token.cancelled
    assert isinstance(token.reason, Canceled)


def _tb_depth(exc: BaseException) -> int:
    depth, tb = 0, exc.__traceback__
    while tb is not None:
        depth, tb = depth + 1, tb.tb_next
    return depth


def test_reraised_reason_does_not_accumulate_traceback(token) -> None:
    token.cancel()
    depths = []
    for _ in range(3):
        with pytest.raises(Canceled) as ei:
            token.raise_if_cancelled()
        depths.append(_tb_depth(ei.value))

    assert depths[0] == depths[1] == depths[2]


def test_failing_callback_does_not_block_the_others(token, caplog) -> None:
    calls: list[str] = []

    def bad() -> None:
        raise RuntimeError("callback boom")

    token.add_callback(bad)
    token.add_callback(lambda: calls.append("after"))

    with caplog.at_level(logging.ERROR, logger="periodic_ticker.cancellation"):
        token.cancel()

    assert calls == ["after"]
    assert "cancellation callback failed" in caplog.text
