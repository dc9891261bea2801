"""User preferences shared with the tray/settings app.

The core only reads this file. Any failure falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger("settings")

APP_DIR_NAME = "ConsultUserMCP"


@dataclass(frozen=True)
class Settings:
    humanize_responses: bool = True
    review_before_send: bool = False
    auto_check_for_updates: bool = True


def settings_path() -> Path:
    override = (os.getenv("CONSULT_USER_SETTINGS") or "").strip()
    if override:
        return Path(override).expanduser()
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(appdata) / APP_DIR_NAME / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME / "settings.json"
    config_home = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "consult-user-mcp" / "settings.json"


def _flag(raw: dict, key: str, default: bool) -> bool:
    value = raw.get(key)
    return value if isinstance(value, bool) else default


def read_settings(path: Path | None = None) -> Settings:
    """Read settings; returns defaults on any error."""
    path = path or settings_path()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.debug(f"Using default settings ({path}: {e})")
        return Settings()
    if not isinstance(raw, dict):
        return Settings()

    defaults = Settings()
    return Settings(
        humanize_responses=_flag(raw, "humanizeResponses", defaults.humanize_responses),
        review_before_send=_flag(raw, "reviewBeforeSend", defaults.review_before_send),
        auto_check_for_updates=_flag(raw, "autoCheckForUpdatesEnabled", defaults.auto_check_for_updates),
    )
