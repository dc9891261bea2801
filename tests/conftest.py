from __future__ import annotations

import asyncio

import pytest

from consult_user.settings import Settings
from consult_user.types import (
    ChoiceResult,
    ConfirmResult,
    QuestionsResult,
    TextInputResult,
    TweakResult,
)


class FakeProvider:
    """In-memory DialogProvider returning canned raw payloads."""

    def __init__(self, payload: dict | None = None, *, delay: float = 0.0, error: Exception | None = None):
        self.payload = payload or {}
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, object, str]] = []
        self.pulses = 0
        self.previews: list[str] = []
        self.preview_error: Exception | None = None
        self.client_name = "MCP"
        self.notify_result = {"success": True}

    def set_client_name(self, name: str) -> None:
        self.client_name = name

    def pulse(self) -> None:
        self.pulses += 1

    async def _show(self, command: str, opts, project_path: str, result_cls):
        self.calls.append((command, opts, project_path))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return result_cls.from_payload(self.payload)

    async def confirm(self, opts, *, project_path=""):
        return await self._show("confirm", opts, project_path, ConfirmResult)

    async def choose(self, opts, *, project_path=""):
        return await self._show("choose", opts, project_path, ChoiceResult)

    async def text_input(self, opts, *, project_path=""):
        return await self._show("textInput", opts, project_path, TextInputResult)

    async def questions(self, opts, *, project_path=""):
        return await self._show("questions", opts, project_path, QuestionsResult)

    async def tweak(self, opts, *, project_path=""):
        return await self._show("tweak", opts, project_path, TweakResult)

    async def notify(self, opts, *, project_path=""):
        self.calls.append(("notify", opts, project_path))
        if self.error is not None:
            raise self.error
        return self.notify_result

    async def preview(self, opts):
        self.previews.append(opts.body)
        if self.preview_error is not None:
            raise self.preview_error
        return {"success": True}


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


def compact_settings() -> Settings:
    return Settings(humanize_responses=False, review_before_send=False)


def humanized_settings() -> Settings:
    return Settings(humanize_responses=True, review_before_send=False)


def position_to_offset(content: str, line: int, column: int) -> int:
    """Inverse of ``offset_to_position``: 1-indexed (line, column) to an offset."""
    offset = 0
    for _ in range(line - 1):
        offset = content.index("\n", offset) + 1
    return offset + column - 1
