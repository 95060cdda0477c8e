"""Cancellable interval timers on the running asyncio loop.

Every timer is owned by the component that created it; owners call
:meth:`IntervalTask.cancel` on teardown so no background task outlives them.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)


class IntervalTask:
    """Invoke *callback* every *interval* seconds until cancelled.

    The first invocation happens one interval after :meth:`start`.
    Exceptions raised by the callback are logged and do not stop the timer.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "interval") -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._interval = interval
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the timer on the running loop (restarting it if active)."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"pyguia-{self._name}")
        _logger.debug("Timer %s started (%.3fs interval)", self._name, self._interval)

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            _logger.debug("Timer %s cancelled", self._name)

    async def wait_cancelled(self) -> None:
        """Cancel and wait for the underlying task to finish."""
        task = self._task
        self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._callback()
            except Exception:
                _logger.warning("Timer %s callback failed", self._name, exc_info=True)
