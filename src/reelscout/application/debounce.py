"""Cancellable quiet-period timer (debounce) on the asyncio event loop.

Usage::

    timer = DebounceTimer(0.5, on_settled)

    timer.arm("b")      # starts the quiet period
    timer.arm("ba")     # resets it
    timer.arm("bat")    # resets it again
    # ... 0.5s of silence -> on_settled("bat") fires exactly once

    timer.flush()       # fire now (explicit submit)
    timer.cancel()      # drop the pending value
    await timer.aclose()
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


class DebounceTimer(Generic[T]):
    """Coalesce rapid updates; only the final settled value fires.

    The callback may be sync or async. Async results are scheduled as
    tasks and tracked so :meth:`wait` / :meth:`aclose` can drain them.
    """

    def __init__(
        self,
        delay_seconds: float,
        callback: Callable[[T], Awaitable[None] | None],
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self._delay = delay_seconds
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._value: T | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a value is waiting for its quiet period to end."""
        return self._handle is not None

    def arm(self, value: T) -> None:
        """Store ``value`` and (re)start the quiet period."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._value = value
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._value = None

    def flush(self) -> bool:
        """Fire immediately if a value is pending. Returns whether it fired."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None
        log.debug("debounce_fired", delay_seconds=self._delay)
        result = self._callback(value)  # type: ignore[arg-type]
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def wait(self) -> None:
        """Wait for callbacks already fired (async ones) to complete."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        self.cancel()
        await self.wait()
