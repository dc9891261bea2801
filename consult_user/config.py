from __future__ import annotations

import os
from dataclasses import dataclass

DIALOG_TIMEOUT_S = 10 * 60
HEARTBEAT_INTERVAL_S = 15.0


def _parse_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _parse_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class ServerConfig:
    dialog_cli: str | None
    dialog_timeout_s: float
    heartbeat_interval_s: float
    log_level: str
    update_check: bool


def get_server_config() -> ServerConfig:
    dialog_cli = (os.getenv("CONSULT_USER_DIALOG_CLI") or "").strip() or None
    log_level = (os.getenv("CONSULT_USER_LOG_LEVEL") or "INFO").strip().upper() or "INFO"
    return ServerConfig(
        dialog_cli=dialog_cli,
        dialog_timeout_s=_parse_float(os.getenv("CONSULT_USER_DIALOG_TIMEOUT_S"), DIALOG_TIMEOUT_S),
        heartbeat_interval_s=_parse_float(os.getenv("CONSULT_USER_HEARTBEAT_S"), HEARTBEAT_INTERVAL_S),
        log_level=log_level,
        update_check=_parse_bool(os.getenv("CONSULT_USER_UPDATE_CHECK"), default=True),
    )
