"""macOS provider: native AppKit dialogs via the compiled Swift CLI."""

from __future__ import annotations

from pathlib import Path

from consult_user.providers.cli import INSTALL_ROOT, CLIDialogProvider


class SwiftDialogProvider(CLIDialogProvider):
    label = "Dialog CLI"
    install_hint = (
        "Setup instructions:\n"
        "  1. Install Xcode command line tools\n"
        "  2. cd dialog-cli && swift build -c release"
    )

    def candidate_paths(self) -> list[Path]:
        return [INSTALL_ROOT / "dialog-cli" / "dialog-cli"]
