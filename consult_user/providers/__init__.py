"""Dialog providers for each platform."""

from consult_user.providers.cli import CLIDialogProvider
from consult_user.providers.ports import DialogProvider
from consult_user.providers.registry import create_provider
from consult_user.providers.swift import SwiftDialogProvider
from consult_user.providers.windows import WindowsDialogProvider

__all__ = [
    "CLIDialogProvider",
    "DialogProvider",
    "SwiftDialogProvider",
    "WindowsDialogProvider",
    "create_provider",
]
