"""Tests for the deadline signal."""

from __future__ import annotations

import asyncio
import time

import pytest

from surrealgate.deadline import Deadline
from surrealgate.errors import DeadlineExceeded


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_unbounded_deadline_never_expires_on_its_own() -> None:
    deadline = Deadline()

    assert deadline.expired is False
    assert deadline.remaining() is None
    assert deadline.reason is None
    assert repr(deadline) == "<Deadline unbounded>"


def test_cancel_keeps_first_reason() -> None:
    deadline = Deadline(10)

    deadline.cancel("first")
    deadline.cancel("second")

    assert deadline.expired is True
    assert isinstance(deadline.reason, DeadlineExceeded)
    assert deadline.reason.reason == "first"
    assert deadline.remaining() == 0.0


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        Deadline(-1)


def test_deadline_expires_after_timeout() -> None:
    deadline = Deadline.after(0.01)

    time.sleep(0.02)

    assert deadline.expired is True
    assert deadline.reason is not None
    assert "0.01s" in deadline.reason.reason


@pytest.mark.anyio
async def test_wait_returns_after_timeout() -> None:
    deadline = Deadline(0.05)

    started = time.perf_counter()
    reason = await deadline.wait()

    assert time.perf_counter() - started >= 0.04
    assert reason is deadline.reason


@pytest.mark.anyio
async def test_wait_wakes_on_cancel() -> None:
    deadline = Deadline()
    asyncio.get_running_loop().call_later(0.01, deadline.cancel, "shutdown")

    reason = await asyncio.wait_for(deadline.wait(), 1)

    assert reason.reason == "shutdown"


@pytest.mark.anyio
async def test_wait_on_fired_deadline_returns_immediately() -> None:
    deadline = Deadline(0)

    reason = await asyncio.wait_for(deadline.wait(), 0.5)

    assert deadline.expired is True
    assert reason is deadline.reason
