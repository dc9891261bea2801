"""Consult-user session orchestration.

This module owns the glue between the agent-facing tools and a provider:
- request validation and routing
- the single-flight guard, the dialog deadline and the heartbeat
- compacting / humanizing what the human answered
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, TypeVar

from consult_user.compact import compact_response
from consult_user.config import DIALOG_TIMEOUT_S, HEARTBEAT_INTERVAL_S
from consult_user.errors import DialogTimeout, ProviderError, ValidationError
from consult_user.humanize import humanize
from consult_user.providers.ports import DialogProvider
from consult_user.resolvers.tweak import resolve_tweak_parameters
from consult_user.session.guard import SingleFlight
from consult_user.session.heartbeat import Heartbeat, ProgressSink
from consult_user.session.requests import AskRequest, parse_body, parse_notify, parse_position, parse_title
from consult_user.settings import Settings, read_settings
from consult_user.types import PreviewOptions, TweakOptions

log = logging.getLogger("session")

T = TypeVar("T")

PREVIEW_TIMEOUT_S = 10.0

# ask type -> provider operation
ASK_ROUTES = {
    "confirm": "confirm",
    "pick": "choose",
    "text": "text_input",
    "form": "questions",
}


class ConsultSession:
    """Process-wide dialog session: one provider, one dialog at a time."""

    def __init__(
        self,
        provider: DialogProvider,
        *,
        timeout_s: float = DIALOG_TIMEOUT_S,
        heartbeat_interval_s: float = HEARTBEAT_INTERVAL_S,
        settings_loader: Callable[[], Settings] = read_settings,
    ):
        self.provider = provider
        self._timeout_s = timeout_s
        self._heartbeat_interval_s = heartbeat_interval_s
        self._settings_loader = settings_loader
        self._guard = SingleFlight()
        self._project_path: str | None = None

    @property
    def dialog_open(self) -> bool:
        return self._guard.in_flight

    def project_path_for(self, explicit: str | None) -> str:
        """Cache the first explicit project path; fall back to it afterwards."""
        if explicit:
            self._project_path = explicit
        return explicit or self._project_path or ""

    async def _with_deadline(self, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(call(), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            log.warning(f"Dialog timed out after {self._timeout_s:g}s")
            raise DialogTimeout(self._timeout_s) from None

    async def _show(self, ask_type: str, call: Callable[[], Awaitable[Any]]) -> str:
        raw = await self._with_deadline(call)
        return await self._finish(ask_type, raw)

    async def _tracked(
        self,
        ask_type: str,
        call: Callable[[], Awaitable[Any]],
        progress: ProgressSink | None,
    ) -> str:
        """Guarded dialog with a heartbeat for this caller.

        Callers that join an open dialog receive the owner's final text.
        """
        async with Heartbeat(send=progress, interval_s=self._heartbeat_interval_s):
            return await self._guard.run(lambda: self._show(ask_type, call))

    async def _finish(self, ask_type: str, raw: Any) -> str:
        compact = compact_response(ask_type, raw)
        settings = self._settings_loader()
        text = humanize(compact) if settings.humanize_responses else json.dumps(compact)

        if settings.review_before_send and not compact.get("snoozed"):
            await self._preview(text)
        return text

    async def _preview(self, text: str) -> None:
        try:
            await asyncio.wait_for(
                self.provider.preview(PreviewOptions(body=text)),
                timeout=PREVIEW_TIMEOUT_S,
            )
        except Exception as e:
            log.debug(f"Preview failed: {e}")

    async def ask(self, arguments: dict[str, Any] | AskRequest, *, progress: ProgressSink | None = None) -> str:
        """Run one ``ask`` call and return the agent-visible text."""
        request = arguments if isinstance(arguments, AskRequest) else AskRequest.from_arguments(arguments)

        self.provider.pulse()
        project_path = self.project_path_for(request.project_path)
        log.info(f"ask type={request.type}: {request.body[:50]}...")

        route = ASK_ROUTES.get(request.type)
        if route is None:
            raise ValidationError(f"Unknown ask type: {request.type}")
        show = getattr(self.provider, route)

        return await self._tracked(
            request.type,
            lambda: show(request.options, project_path=project_path),
            progress,
        )

    async def tweak(self, arguments: dict[str, Any], *, progress: ProgressSink | None = None) -> str:
        """Resolve tweak parameters to file locations, then open the tweak pane."""
        if not isinstance(arguments, dict):
            raise ValidationError("tweak arguments must be an object")
        body = parse_body(arguments)
        position = parse_position(arguments)
        title = parse_title(arguments)

        self.provider.pulse()
        project_path = self.project_path_for(arguments.get("project_path"))
        parameters = resolve_tweak_parameters(arguments.get("parameters"), project_path)
        log.info(f"tweak with {len(parameters)} parameter(s): {body[:50]}...")

        opts = TweakOptions(body=body, parameters=parameters, title=title, position=position)
        return await self._tracked("tweak", lambda: self.provider.tweak(opts, project_path=project_path), progress)

    async def notify(self, arguments: dict[str, Any]) -> dict[str, bool]:
        """Non-blocking notification; provider failures report ``success: false``."""
        opts = parse_notify(arguments)
        self.provider.pulse()
        project_path = self.project_path_for(arguments.get("project_path"))
        try:
            result = await self.provider.notify(opts, project_path=project_path)
        except ProviderError as e:
            log.warning(f"Notification failed: {e}")
            return {"success": False}
        return {"success": bool(result.get("success"))}
