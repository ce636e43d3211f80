"""
Tests for deadline layering.
"""
import asyncio
import time

import pytest

from app.core.deadline import Deadline, DeadlineExceeded, run_with_deadline


def test_unbounded_deadline_never_expires():
    deadline = Deadline()
    assert deadline.remaining() is None
    assert not deadline.expired
    deadline.check("nothing")


def test_child_uses_local_timeout_under_unbounded_parent():
    child = Deadline().child(5.0)
    assert 4.0 < child.remaining() <= 5.0


def test_child_never_outlives_parent():
    """The tighter of parent and local budget wins."""
    parent = Deadline.after(0.05)
    child = parent.child(10.0)
    assert child.expires_at == parent.expires_at


def test_child_can_be_tighter_than_parent():
    parent = Deadline.after(10.0)
    child = parent.child(0.01)
    assert child.expires_at < parent.expires_at


def test_check_raises_after_expiry():
    deadline = Deadline.after(0.001)
    time.sleep(0.01)
    assert deadline.expired
    assert deadline.remaining() == 0.0
    with pytest.raises(DeadlineExceeded) as exc:
        deadline.check("gravação")
    assert "gravação" in str(exc.value)
    assert isinstance(exc.value, TimeoutError)


def test_run_with_deadline_returns_result():
    async def quick():
        return "ok"

    result = asyncio.run(run_with_deadline(quick(), Deadline.after(1.0), "quick"))
    assert result == "ok"


def test_run_with_deadline_cancels_slow_operation():
    cancelled = []

    async def slow():
        try:
            await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    start = time.monotonic()
    with pytest.raises(DeadlineExceeded):
        asyncio.run(run_with_deadline(slow(), Deadline.after(0.02), "slow"))
    assert time.monotonic() - start < 0.5
    assert cancelled == [True]
