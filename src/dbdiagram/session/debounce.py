"""Cancel-and-reschedule debouncer on the running asyncio loop."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()


@dataclass
class Debouncer:
    """
    Runs callback once, delay seconds after the last trigger().

    Every trigger() cancels the pending task and schedules a new one, so a
    burst of triggers produces a single call. After dispose() nothing
    runs: further triggers are ignored and a callback whose delay is
    already under way is skipped.
    """

    callback: Callable[[], object]
    delay: float = 0.3

    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _disposed: bool = field(default=False, init=False)
    calls: int = field(default=0, init=False)

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def trigger(self) -> None:
        """Schedule the callback, replacing any pending one."""
        if self._disposed:
            return
        loop = asyncio.get_running_loop()
        replaced = self.pending
        self.cancel()
        self._task = loop.create_task(self._run_after_delay())
        logger.debug("debounce_scheduled", delay=self.delay, replaced=replaced)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def flush(self) -> None:
        """Run a pending callback now instead of waiting out the delay."""
        if not self.pending or self._disposed:
            return
        self.cancel()
        self._task = None
        await self._invoke()

    async def dispose(self) -> None:
        self._disposed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None

    async def _run_after_delay(self) -> None:
        try:
            await asyncio.sleep(self.delay)
            await self._invoke()
        except asyncio.CancelledError:
            pass

    async def _invoke(self) -> None:
        if self._disposed:
            return
        self.calls += 1
        result = self.callback()
        if inspect.isawaitable(result):
            await result
