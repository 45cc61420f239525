"""Cooperative cancellation for in-flight instructions.

Each dispatched instruction gets its own token. Every suspension point
(animation frame, settle pause, ``WAIT``) goes through :meth:`sleep` or
:meth:`check`, which raise :class:`ExecutionCancelled` once the token has been
cancelled.
"""

from __future__ import annotations

import asyncio

from gridbot.errors import ExecutionCancelled


class CancellationToken:
    """One-shot cancellation flag that can also interrupt sleeps."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def check(self) -> None:
        if self._event.is_set():
            raise ExecutionCancelled(self.reason or "cancelled")

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first; always yields once."""
        self.check()
        if seconds <= 0:
            await asyncio.sleep(0)
        else:
            try:
                await asyncio.wait_for(self._event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                pass
        self.check()
