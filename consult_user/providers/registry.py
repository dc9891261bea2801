"""Provider registry.

Maps the running platform to its concrete provider. Callers should depend
on the `DialogProvider` port.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from consult_user.providers.ports import DialogProvider


def create_provider(platform: str | None = None, *, executable: str | None = None) -> DialogProvider:
    platform = (platform or sys.platform).strip().lower()

    if platform == "win32":
        from consult_user.providers.windows import WindowsDialogProvider

        return WindowsDialogProvider(executable)

    from consult_user.providers.swift import SwiftDialogProvider

    return SwiftDialogProvider(executable)
