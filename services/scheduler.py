"""
Deferred Scheduler

Delayed callbacks on the running asyncio loop, tagged with an epoch so that
work scheduled before an invalidation never acts on newer state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class DeferredScheduler:
    """Schedules epoch-checked callbacks via loop.call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._epoch = 0
        self._handles: set[asyncio.TimerHandle] = set()

    @property
    def epoch(self) -> int:
        return self._epoch

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """Run callback after delay seconds unless invalidated first."""
        loop = self._loop or asyncio.get_running_loop()
        epoch = self._epoch
        handle: asyncio.TimerHandle | None = None

        def run() -> None:
            self._handles.discard(handle)
            if epoch != self._epoch:
                logger.debug(f"Dropping stale deferred {getattr(callback, '__name__', callback)}")
                return
            callback(*args)

        handle = loop.call_later(delay, run)
        self._handles.add(handle)

    def invalidate(self) -> None:
        """Cancel pending callbacks and start a new epoch."""
        self._epoch += 1
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    def pending(self) -> int:
        return len(self._handles)
