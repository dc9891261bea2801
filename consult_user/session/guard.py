"""Single-flight guard: at most one dialog open per process.

Only one native window can sensibly hold keyboard focus. A second caller
that arrives while a dialog is open awaits the same task and receives the
same result (or error) instead of opening another window.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

log = logging.getLogger("session")

T = TypeVar("T")


class SingleFlight:
    def __init__(self):
        self._task: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Start ``factory()`` unless a call is already in flight, then await it."""
        task = self._task
        if task is None:
            task = asyncio.get_running_loop().create_task(self._owned(factory))
            self._task = task
        else:
            log.info("Dialog already open; waiting on the in-flight request")
        # Shielded so one caller giving up does not close the shared dialog.
        return await asyncio.shield(task)

    async def _owned(self, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            return await factory()
        finally:
            if self._task is asyncio.current_task():
                self._task = None
