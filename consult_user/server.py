"""MCP stdio server exposing the ask / tweak / notify tools.

Messages are newline-delimited JSON-RPC 2.0 on stdin/stdout. Each
``tools/call`` runs as its own task so concurrent calls reach the session's
single-flight guard; every write to stdout goes through one lock.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Awaitable, Callable

from consult_user import __version__
from consult_user.config import ServerConfig, get_server_config
from consult_user.errors import ConsultError
from consult_user.session import ConsultSession, ProgressSink
from consult_user.settings import Settings, read_settings
from consult_user.types import ASK_TYPES, POSITIONS, QUESTION_MODES, NotifyOptions
from consult_user.update_check import check_for_update

log = logging.getLogger("server")

SERVER_NAME = "consult-user-mcp-server"
PROTOCOL_VERSION = "2025-06-18"
STDIN_LIMIT = 10 * 1024 * 1024

Writer = Callable[[dict[str, Any]], Awaitable[None]]

_POSITION = {"type": "string", "enum": list(POSITIONS), "default": "left"}
_PROJECT_PATH = {"type": "string", "description": "Project root; cached for later calls."}

TOOLS: list[dict[str, Any]] = [
    {
        "name": "ask",
        "description": (
            "Interactive dialog. Types: confirm (yes/no), pick (select from list), text (free "
            "input), form (multi-question). 10min timeout. If snoozed: sleep remainingSeconds, retry."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": list(ASK_TYPES)},
                "body": {"type": "string", "minLength": 1, "maxLength": 1000},
                "yes": {"type": "string", "maxLength": 20, "default": "Yes"},
                "no": {"type": "string", "maxLength": 20, "default": "No"},
                "choices": {
                    "type": "array",
                    "items": {"type": "string", "maxLength": 100},
                    "minItems": 1,
                    "maxItems": 20,
                },
                "multi": {"type": "boolean", "default": False},
                "descriptions": {"type": "array", "items": {"type": "string"}},
                "default": {"type": "string"},
                "hidden": {"type": "boolean", "default": False},
                "questions": {
                    "type": "array",
                    "minItems": 1,
                    "maxItems": 10,
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string", "maxLength": 50},
                            "question": {"type": "string", "maxLength": 500},
                            "type": {"type": "string", "enum": ["choice", "text"], "default": "choice"},
                            "options": {"type": "array", "items": {"type": "string", "maxLength": 100}},
                            "descriptions": {"type": "array", "items": {"type": "string"}},
                            "multi": {"type": "boolean", "default": False},
                            "placeholder": {"type": "string"},
                            "hidden": {"type": "boolean", "default": False},
                        },
                        "required": ["id", "question"],
                    },
                },
                "mode": {"type": "string", "enum": list(QUESTION_MODES), "default": "wizard"},
                "title": {"type": "string", "maxLength": 80},
                "position": _POSITION,
                "project_path": _PROJECT_PATH,
            },
            "required": ["type", "body"],
        },
    },
    {
        "name": "tweak",
        "description": (
            "Value tweak pane. Opens an always-on-top slider panel for real-time numeric value "
            'adjustment with live file writes. User completes via "Save to File" (keeps file '
            'writes, action:"file") or "Tell Agent" (reverts files, returns desired values for '
            'you to apply, action:"agent"). 10min timeout. If snoozed: sleep remainingSeconds, retry.'
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "body": {"type": "string", "minLength": 1, "maxLength": 1000},
                "parameters": {
                    "type": "array",
                    "minItems": 1,
                    "maxItems": 20,
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string"},
                            "label": {"type": "string"},
                            "element": {"type": "string"},
                            "file": {"type": "string"},
                            "selector": {"type": "string"},
                            "property": {"type": "string"},
                            "index": {"type": "integer", "minimum": 0},
                            "fn": {"type": "string"},
                            "search": {"type": "string", "description": 'Pattern with one "{v}" placeholder'},
                            "line": {"type": "integer", "minimum": 1},
                            "column": {"type": "integer", "minimum": 1},
                            "expectedText": {"type": "string"},
                            "current": {"type": "number"},
                            "min": {"type": "number"},
                            "max": {"type": "number"},
                            "step": {"type": "number", "exclusiveMinimum": 0},
                            "unit": {"type": "string"},
                        },
                        "required": ["label", "file", "min", "max"],
                    },
                },
                "title": {"type": "string", "maxLength": 80},
                "position": _POSITION,
                "project_path": _PROJECT_PATH,
            },
            "required": ["body", "parameters"],
        },
    },
    {
        "name": "notify",
        "description": "Non-blocking notification. Returns {success}.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "body": {"type": "string", "minLength": 1, "maxLength": 1000},
                "title": {"type": "string", "maxLength": 80, "default": "Notice"},
                "sound": {"type": "boolean", "default": True},
                "project_path": _PROJECT_PATH,
            },
            "required": ["body"],
        },
    },
]


class JSONRPCError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = int(code)
        self.message = message


def _text_result(text: str, *, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


class StdoutWriter:
    """Serialised newline-delimited JSON writes."""

    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.stdout.buffer
        self._lock = asyncio.Lock()

    async def __call__(self, payload: dict[str, Any]) -> None:
        data = (json.dumps(payload, ensure_ascii=True) + "\n").encode("utf-8")
        async with self._lock:
            self._stream.write(data)
            self._stream.flush()


class ConsultServer:
    def __init__(
        self,
        session: ConsultSession,
        *,
        write: Writer,
        config: ServerConfig | None = None,
        settings_loader: Callable[[], Settings] = read_settings,
    ):
        self._session = session
        self._write = write
        self._config = config or get_server_config()
        self._settings_loader = settings_loader
        self._tasks: set[asyncio.Task] = set()
        self.client_name = "MCP"

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _progress_sink(self, token: Any) -> ProgressSink | None:
        if token is None:
            return None

        async def send(progress: int, message: str) -> None:
            await self._write(
                {
                    "jsonrpc": "2.0",
                    "method": "notifications/progress",
                    "params": {"progressToken": token, "progress": progress, "message": message},
                }
            )

        return send

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Handle one JSON-RPC message; returns the response, or None for notifications."""
        request_id = message.get("id")
        method = str(message.get("method") or "")
        params = message.get("params")
        if not isinstance(params, dict):
            params = {}

        if "id" not in message:
            self._handle_notification(method, params)
            return None

        try:
            if method == "initialize":
                result = self._handle_initialize(params)
            elif method == "ping":
                result = {}
            elif method == "tools/list":
                result = {"tools": TOOLS}
            elif method == "tools/call":
                result = await self._handle_tools_call(params)
            else:
                raise JSONRPCError(-32601, f"Method not found: {method}")
            return {"jsonrpc": "2.0", "id": request_id, "result": result}
        except JSONRPCError as e:
            return {"jsonrpc": "2.0", "id": request_id, "error": {"code": e.code, "message": e.message}}

    def _handle_notification(self, method: str, params: dict[str, Any]) -> None:
        if method == "notifications/initialized":
            if self._config.update_check:
                self._spawn(self._check_for_update())
        else:
            log.debug(f"Ignoring notification {method}")

    def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client_info = params.get("clientInfo")
        name = client_info.get("name") if isinstance(client_info, dict) else None
        self.client_name = name if isinstance(name, str) and name else "MCP"
        self._session.provider.set_client_name(self.client_name)
        log.info(f"Client connected: {self.client_name}")

        version = params.get("protocolVersion")
        return {
            "protocolVersion": version if isinstance(version, str) and version else PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}
        meta = params.get("_meta")
        token = meta.get("progressToken") if isinstance(meta, dict) else None
        progress = self._progress_sink(token)

        try:
            if name == "ask":
                return _text_result(await self._session.ask(arguments, progress=progress))
            if name == "tweak":
                return _text_result(await self._session.tweak(arguments, progress=progress))
            if name == "notify":
                return _text_result(json.dumps(await self._session.notify(arguments)))
        except ConsultError as e:
            log.warning(f"Tool {name} failed: {e}")
            return _text_result(str(e), is_error=True)
        except Exception as e:
            log.exception(f"Tool {name} crashed")
            return _text_result(f"Internal error: {e}", is_error=True)
        raise JSONRPCError(-32602, f"Unknown tool: {name}")

    async def _check_for_update(self) -> None:
        if not self._settings_loader().auto_check_for_updates:
            return
        try:
            result = await check_for_update(__version__)
            if result is None:
                return
            await self._session.provider.notify(
                NotifyOptions(
                    body=(
                        f"v{result.remote_version} is available (you have v{result.current_version}). "
                        "Right-click tray icon → Check for Updates."
                    ),
                    title="Update Available",
                    sound=False,
                )
            )
        except Exception as e:
            log.debug(f"Update check failed: {e}")

    async def _dispatch(self, message: dict[str, Any]) -> None:
        response = await self.handle(message)
        if response is not None:
            await self._write(response)

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """Read messages until EOF; tool calls run concurrently."""
        while True:
            line = await reader.readline()
            if not line:
                break
            text = line.decode("utf-8", errors="replace").strip()
            if not text:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                await self._write(
                    {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
                )
                continue
            if not isinstance(message, dict):
                continue

            if message.get("method") == "tools/call":
                self._spawn(self._dispatch(message))
            else:
                await self._dispatch(message)

        log.info("stdin closed; shutting down")
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


async def open_stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=STDIN_LIMIT)
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    return reader
