"""Ports (interfaces) for dialog providers.

The session layer depends on this contract rather than on a concrete
platform implementation; tests substitute an in-memory fake.
"""

from __future__ import annotations

from typing import Any, Protocol

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


class DialogProvider(Protocol):
    """Renders dialogs on one platform."""

    def set_client_name(self, name: str) -> None:
        """Name used to title dialogs; set once after MCP initialization."""
        ...

    def pulse(self) -> None:
        """Fire-and-forget liveness ping. Never raises, never blocks."""
        ...

    async def confirm(self, opts: ConfirmOptions, *, project_path: str = "") -> ConfirmResult:
        ...

    async def choose(self, opts: ChooseOptions, *, project_path: str = "") -> ChoiceResult:
        ...

    async def text_input(self, opts: TextInputOptions, *, project_path: str = "") -> TextInputResult:
        ...

    async def questions(self, opts: QuestionsOptions, *, project_path: str = "") -> QuestionsResult:
        ...

    async def tweak(self, opts: TweakOptions, *, project_path: str = "") -> TweakResult:
        ...

    async def notify(self, opts: NotifyOptions, *, project_path: str = "") -> dict[str, Any]:
        ...

    async def preview(self, opts: PreviewOptions) -> dict[str, Any]:
        ...
