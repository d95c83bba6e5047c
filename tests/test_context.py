"""Tests for the run context."""

import threading
import time

import pytest

from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)


def test_background_context() -> None:
    ctx = RunContext.background()
    assert not ctx.cancelled
    assert not ctx.expired
    assert ctx.remaining() is None
    ctx.raise_if_cancelled()


def test_cancel_from_another_thread() -> None:
    ctx = RunContext()
    worker = threading.Thread(target=ctx.cancel)
    worker.start()
    worker.join()

    assert ctx.cancelled
    with pytest.raises(RunCancelled, match="run cancelled"):
        ctx.raise_if_cancelled()


def test_timeout() -> None:
    ctx = RunContext(timeout=60)
    remaining = ctx.remaining()
    assert remaining is not None and 0 < remaining <= 60
    assert not ctx.expired


def test_expired_deadline() -> None:
    ctx = RunContext(deadline=time.monotonic() - 1)
    assert ctx.expired
    assert ctx.remaining() == 0.0
    with pytest.raises(RunCancelled, match="deadline exceeded"):
        ctx.raise_if_cancelled()


def test_timeout_and_deadline_are_exclusive() -> None:
    with pytest.raises(ValueError):
        RunContext(timeout=1, deadline=time.monotonic())
