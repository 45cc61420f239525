"""Tests for gridbot.simulation.cancellation module."""

from __future__ import annotations

import asyncio
import time

import pytest

from gridbot.errors import ExecutionCancelled
from gridbot.simulation.cancellation import CancellationToken


def test_fresh_token_is_not_cancelled() -> None:
    token = CancellationToken()
    assert not token.cancelled
    token.check()


def test_cancel_records_first_reason() -> None:
    token = CancellationToken()
    token.cancel("paused")
    token.cancel("stopped")
    assert token.cancelled
    assert token.reason == "paused"
    with pytest.raises(ExecutionCancelled, match="paused"):
        token.check()


def test_sleep_completes_normally() -> None:
    asyncio.run(CancellationToken().sleep(0.01))


def test_zero_sleep_still_yields() -> None:
    order: list[str] = []

    async def other() -> None:
        order.append("other")

    async def go() -> None:
        task = asyncio.create_task(other())
        await CancellationToken().sleep(0)
        order.append("after-sleep")
        await task

    asyncio.run(go())
    assert order == ["other", "after-sleep"]


def test_cancel_interrupts_long_sleep() -> None:
    token = CancellationToken()

    async def go() -> None:
        asyncio.get_running_loop().call_later(0.05, token.cancel, "stopped")
        await token.sleep(10)

    started = time.monotonic()
    with pytest.raises(ExecutionCancelled):
        asyncio.run(go())
    assert time.monotonic() - started < 5
