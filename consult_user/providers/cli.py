"""Dialog provider backed by a native executable.

Every dialog is one process: ``<executable> <command> <json>``. The process
prints exactly one JSON object line on stdout and exits 0.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import signal
from pathlib import Path
from typing import Any

from consult_user.errors import (
    ProviderError,
    ProviderExitError,
    ProviderNotFoundError,
    ProviderOutputError,
    ProviderSignalError,
)
from consult_user.providers.subprocess_transport import SubprocessTransport
from consult_user.types import (
    ChoiceResult,
    ChooseOptions,
    ConfirmOptions,
    ConfirmResult,
    NotifyOptions,
    PreviewOptions,
    QuestionsOptions,
    QuestionsResult,
    TextInputOptions,
    TextInputResult,
    TweakOptions,
    TweakResult,
)

log = logging.getLogger("provider")

# Repository / install root: <root>/consult_user/providers/cli.py
INSTALL_ROOT = Path(__file__).resolve().parents[2]


def _signal_name(returncode: int) -> str:
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"signal {-returncode}"


def parse_cli_output(stdout: str, *, label: str, command: str) -> dict[str, Any]:
    text = stdout.strip()
    if not text:
        raise ProviderOutputError("no output", output=stdout, label=label, command=command)
    if "\n" in text:
        raise ProviderOutputError("multi-line output", output=text, label=label, command=command)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        raise ProviderOutputError("invalid JSON", output=text, label=label, command=command) from None
    if not isinstance(payload, dict):
        raise ProviderOutputError("non-object JSON", output=text, label=label, command=command)
    return payload


class CLIDialogProvider:
    """Base class for executable-backed providers.

    Subclasses supply where the executable lives and how to install it.
    """

    label = "Dialog CLI"
    install_hint: str | None = None

    def __init__(self, executable: str | None = None):
        self._executable = executable
        self._client_name = "MCP"
        self._background: set[asyncio.Task] = set()

    def set_client_name(self, name: str) -> None:
        self._client_name = name or "MCP"

    def candidate_paths(self) -> list[Path]:
        return []

    def executable_path(self) -> str:
        if self._executable:
            return self._executable
        candidates = self.candidate_paths()
        for path in candidates:
            if path.exists():
                return str(path)
        expected = str(candidates[0]) if candidates else "<unset>"
        raise ProviderNotFoundError(expected, label=self.label, hint=self.install_hint)

    def _env(self, project_path: str) -> dict[str, str]:
        env = {**os.environ, "MCP_CLIENT_NAME": self._client_name}
        if project_path:
            env["MCP_PROJECT_PATH"] = project_path
        return env

    async def run_cli(self, command: str, args: dict[str, Any], *, project_path: str = "") -> dict[str, Any]:
        path = self.executable_path()
        cmd = [path, command, json.dumps(args)]
        log.debug(f"{self.label}: {command} {cmd[2][:120]}")

        transport = SubprocessTransport()
        try:
            run = await transport.run(cmd, env=self._env(project_path))
        except FileNotFoundError:
            raise ProviderNotFoundError(path, label=self.label, hint=self.install_hint) from None
        except OSError as e:
            raise ProviderError(f"failed: {e}", label=self.label, command=command) from e

        if run.returncode < 0:
            raise ProviderSignalError(_signal_name(run.returncode), label=self.label, command=command)
        if run.returncode != 0:
            raise ProviderExitError(run.returncode, stderr=run.stderr, label=self.label, command=command)
        return parse_cli_output(run.stdout, label=self.label, command=command)

    def _spawn(self, coro) -> None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            return
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _pulse_quietly(self) -> None:
        try:
            await self.run_cli("pulse", {})
        except Exception as e:
            log.debug(f"{self.label}: pulse failed: {e}")

    def pulse(self) -> None:
        self._spawn(self._pulse_quietly())

    async def confirm(self, opts: ConfirmOptions, *, project_path: str = "") -> ConfirmResult:
        payload = await self.run_cli("confirm", opts.to_payload(), project_path=project_path)
        return ConfirmResult.from_payload(payload)

    async def choose(self, opts: ChooseOptions, *, project_path: str = "") -> ChoiceResult:
        payload = await self.run_cli("choose", opts.to_payload(), project_path=project_path)
        return ChoiceResult.from_payload(payload)

    async def text_input(self, opts: TextInputOptions, *, project_path: str = "") -> TextInputResult:
        payload = await self.run_cli("textInput", opts.to_payload(), project_path=project_path)
        return TextInputResult.from_payload(payload)

    async def questions(self, opts: QuestionsOptions, *, project_path: str = "") -> QuestionsResult:
        payload = await self.run_cli("questions", opts.to_payload(), project_path=project_path)
        return QuestionsResult.from_payload(payload)

    async def tweak(self, opts: TweakOptions, *, project_path: str = "") -> TweakResult:
        payload = await self.run_cli("tweak", opts.to_payload(), project_path=project_path)
        return TweakResult.from_payload(payload)

    async def notify(self, opts: NotifyOptions, *, project_path: str = "") -> dict[str, Any]:
        payload = await self.run_cli("notify", opts.to_payload(), project_path=project_path)
        return {"success": payload.get("success") is True}

    async def preview(self, opts: PreviewOptions) -> dict[str, Any]:
        return await self.run_cli("preview", opts.to_payload())
