"""Progress keepalive while a dialog waits on the human.

MCP clients may time out a tool call that stays silent. This helper emits a
progress notification on a fixed interval while the dialog is open.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

log = logging.getLogger("session")

WAITING_MESSAGE = "Waiting for user response"

# Receives (progress counter, message).
ProgressSink = Callable[[int, str], Awaitable[None]]


class Heartbeat:
    def __init__(
        self,
        *,
        send: ProgressSink | None,
        interval_s: float = 15.0,
        message: str = WAITING_MESSAGE,
    ):
        self._send = send
        self._interval_s = interval_s
        self._message = message
        self._task: asyncio.Task | None = None
        self.count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval_s)
                self.count += 1
                try:
                    await self._send(self.count, self._message)
                except Exception as e:
                    log.debug(f"Heartbeat send failed: {e}")
        except asyncio.CancelledError:
            return

    def start(self) -> None:
        if self._send is None or self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "Heartbeat":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()
