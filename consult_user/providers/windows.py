"""Windows provider: WPF dialogs via the compiled C# CLI."""

from __future__ import annotations

from pathlib import Path

from consult_user.providers.cli import INSTALL_ROOT, CLIDialogProvider

_EXE = "dialog-cli-windows.exe"


class WindowsDialogProvider(CLIDialogProvider):
    label = "Windows Dialog CLI"
    install_hint = (
        "Setup instructions:\n"
        "  1. Install .NET 8 SDK\n"
        "  2. cd dialog-cli-windows && dotnet publish -r win-x64 --self-contained"
    )

    def candidate_paths(self) -> list[Path]:
        base = INSTALL_ROOT / "dialog-cli-windows"
        return [
            # Installed alongside the server
            base / _EXE,
            # Dev: published output
            base / "bin" / "Release" / "net8.0-windows" / "win-x64" / "publish" / _EXE,
            # Dev: debug build
            base / "bin" / "Debug" / "net8.0-windows" / "win-x64" / _EXE,
        ]

    def pulse(self) -> None:
        # No tray app to keep alive on Windows.
        return None
