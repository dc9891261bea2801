from __future__ import annotations

import asyncio
import json
import sys

import pytest

from consult_user.errors import (
    ProviderExitError,
    ProviderNotFoundError,
    ProviderOutputError,
    ProviderSignalError,
)
from consult_user.providers import create_provider
from consult_user.providers.cli import CLIDialogProvider, parse_cli_output
from consult_user.providers.subprocess_transport import SubprocessTransport
from consult_user.providers.swift import SwiftDialogProvider
from consult_user.providers.windows import WindowsDialogProvider
from consult_user.types import ChooseOptions, ConfirmOptions, NotifyOptions

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts")


def _script(tmp_path, body: str) -> str:
    path = tmp_path / "dialog-cli"
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return str(path)


def test_confirm_round_trip(tmp_path):
    exe = _script(
        tmp_path,
        'test "$1" = confirm || exit 3\n'
        'echo \'{"confirmed": true, "cancelled": false}\'\n',
    )
    provider = CLIDialogProvider(exe)
    result = asyncio.run(provider.confirm(ConfirmOptions(body="Deploy?")))
    assert result.confirmed is True
    assert result.cancelled is False


def test_payload_is_passed_as_json_argument(tmp_path):
    exe = _script(
        tmp_path,
        'printf "%s" "$1" > "$(dirname "$0")/command.txt"\n'
        'printf "%s" "$2" > "$(dirname "$0")/args.json"\n'
        "echo '{\"answer\": [\"a\", \"b\"]}'\n",
    )
    provider = CLIDialogProvider(exe)
    result = asyncio.run(provider.choose(ChooseOptions(body="Pick", choices=["a", "b"], allow_multiple=True)))
    assert result.answer == ["a", "b"]
    assert (tmp_path / "command.txt").read_text() == "choose"
    assert json.loads((tmp_path / "args.json").read_text()) == {
        "body": "Pick",
        "choices": ["a", "b"],
        "allowMultiple": True,
        "position": "left",
    }


def test_environment_carries_client_and_project(tmp_path):
    exe = _script(tmp_path, 'printf \'{"answer": "%s|%s"}\\n\' "$MCP_CLIENT_NAME" "$MCP_PROJECT_PATH"\n')
    provider = CLIDialogProvider(exe)
    provider.set_client_name("Claude Desktop")
    result = asyncio.run(provider.run_cli("textInput", {}, project_path="/work/app"))
    assert result == {"answer": "Claude Desktop|/work/app"}


def test_non_zero_exit_includes_stderr(tmp_path):
    exe = _script(tmp_path, "echo 'window server unavailable' >&2\nexit 2\n")
    with pytest.raises(ProviderExitError) as exc:
        asyncio.run(CLIDialogProvider(exe).run_cli("confirm", {}))
    assert exc.value.returncode == 2
    assert "exited with code 2: window server unavailable" in str(exc.value)
    assert "'confirm'" in str(exc.value)


def test_signal_termination(tmp_path):
    exe = _script(tmp_path, "kill -9 $$\n")
    with pytest.raises(ProviderSignalError) as exc:
        asyncio.run(CLIDialogProvider(exe).run_cli("confirm", {}))
    assert exc.value.signal_name == "SIGKILL"


@pytest.mark.parametrize(
    "body,reason",
    [
        ("echo 'not json'\n", "invalid JSON"),
        ("echo '{\"a\": 1}'\necho '{\"b\": 2}'\n", "multi-line output"),
        ("true\n", "no output"),
        ("echo '[1, 2]'\n", "non-object JSON"),
    ],
)
def test_bad_output(tmp_path, body, reason):
    exe = _script(tmp_path, body)
    with pytest.raises(ProviderOutputError) as exc:
        asyncio.run(CLIDialogProvider(exe).run_cli("confirm", {}))
    assert exc.value.reason == reason


def test_missing_executable_reports_path_and_hint(tmp_path):
    missing = str(tmp_path / "nope" / "dialog-cli")
    provider = SwiftDialogProvider(missing)
    with pytest.raises(ProviderNotFoundError) as exc:
        asyncio.run(provider.confirm(ConfirmOptions(body="x")))
    assert exc.value.path == missing
    assert missing in str(exc.value)


def test_missing_install_uses_first_candidate(monkeypatch, tmp_path):
    provider = SwiftDialogProvider()
    monkeypatch.setattr(provider, "candidate_paths", lambda: [tmp_path / "a", tmp_path / "b"])
    with pytest.raises(ProviderNotFoundError) as exc:
        provider.executable_path()
    assert exc.value.path == str(tmp_path / "a")
    assert exc.value.hint


def test_notify_success_flag(tmp_path):
    ok = _script(tmp_path, "echo '{\"success\": true}'\n")
    assert asyncio.run(CLIDialogProvider(ok).notify(NotifyOptions(body="hi"))) == {"success": True}


def test_pulse_swallows_failures(tmp_path):
    exe = _script(tmp_path, "exit 1\n")
    provider = CLIDialogProvider(exe)

    async def main():
        provider.pulse()
        await asyncio.sleep(0)
        await asyncio.gather(*provider._background)

    asyncio.run(main())
    assert not provider._background


def test_pulse_outside_event_loop_is_a_no_op():
    CLIDialogProvider("/does/not/matter").pulse()


def test_parse_cli_output_accepts_trailing_newline():
    assert parse_cli_output('{"ok": true}\n', label="Dialog CLI", command="x") == {"ok": True}


def test_registry_selects_platform_provider():
    assert isinstance(create_provider("darwin"), SwiftDialogProvider)
    assert isinstance(create_provider("win32"), WindowsDialogProvider)
    assert isinstance(create_provider("linux", executable="/opt/dialog"), SwiftDialogProvider)
    assert create_provider("linux", executable="/opt/dialog").executable_path() == "/opt/dialog"


def test_cancel_kills_and_reaps_child_that_ignores_sigterm(tmp_path):
    exe = _script(tmp_path, 'trap "" TERM\necho ready\nexec sleep 30\n')
    transport = SubprocessTransport(kill_timeout_s=0.1)

    async def main():
        task = asyncio.create_task(transport.run([exe]))
        await asyncio.sleep(0.3)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())
    assert transport.process.returncode == -9


def test_cancel_terminates_cooperative_child(tmp_path):
    exe = _script(tmp_path, "exec sleep 30\n")
    transport = SubprocessTransport(kill_timeout_s=2.0)

    async def main():
        task = asyncio.create_task(transport.run([exe]))
        await asyncio.sleep(0.2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())
    assert transport.process.returncode == -15
