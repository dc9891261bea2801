"""Subprocess transport for dialog executables."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

log = logging.getLogger("provider")


@dataclass(frozen=True)
class CompletedRun:
    returncode: int
    stdout: str
    stderr: str


class SubprocessTransport:
    def __init__(self, *, kill_timeout_s: float = 5.0):
        self.process: asyncio.subprocess.Process | None = None
        self.kill_timeout_s = kill_timeout_s

    async def run(self, cmd: list[str], *, env: dict[str, str] | None = None) -> CompletedRun:
        """Run ``cmd`` to completion, killing it if the awaiting task is cancelled."""
        self.process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
        try:
            stdout, stderr = await self.process.communicate()
        except asyncio.CancelledError:
            await self.cancel_and_kill(self.kill_timeout_s)
            raise

        return CompletedRun(
            returncode=int(self.process.returncode or 0),
            stdout=(stdout or b"").decode("utf-8", errors="replace"),
            stderr=(stderr or b"").decode("utf-8", errors="replace"),
        )

    async def cancel_and_kill(self, timeout: float = 5.0) -> None:
        """Terminate the process, wait, then force-kill if still alive."""
        proc = self.process
        if not proc or proc.returncode is not None:
            return
        try:
            proc.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(proc.wait(), timeout=timeout)
        except (asyncio.TimeoutError, ProcessLookupError):
            log.warning("Process %s did not exit after SIGTERM, sending SIGKILL", proc.pid)
            try:
                proc.kill()
            except ProcessLookupError:
                return
            await proc.wait()
