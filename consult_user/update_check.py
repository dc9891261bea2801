"""Check GitHub for a newer release."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import aiohttp

log = logging.getLogger("update")

REPO_OWNER = "doublej"
REPO_NAME = "consult-user-mcp"
TIMEOUT_S = 5.0


@dataclass(frozen=True)
class UpdateResult:
    current_version: str
    remote_version: str


def version_parts(version: str) -> list[int]:
    return [int(p) for p in re.split(r"[^0-9]+", version) if p]


def is_newer(remote: str, current: str) -> bool:
    r = version_parts(remote)
    c = version_parts(current)
    for i in range(max(len(r), len(c))):
        rv = r[i] if i < len(r) else 0
        cv = c[i] if i < len(c) else 0
        if rv != cv:
            return rv > cv
    return False


def latest_release_url() -> str:
    return f"https://api.github.com/repos/{REPO_OWNER}/{REPO_NAME}/releases/latest"


async def fetch_latest_tag(session: aiohttp.ClientSession) -> str | None:
    async with session.get(
        latest_release_url(),
        headers={"Accept": "application/vnd.github+json"},
    ) as resp:
        if resp.status != 200:
            log.debug(f"Release check HTTP {resp.status}")
            return None
        data = await resp.json(content_type=None)
    tag = data.get("tag_name") if isinstance(data, dict) else None
    return tag if isinstance(tag, str) and tag else None


async def check_for_update(
    current_version: str,
    *,
    session: aiohttp.ClientSession | None = None,
) -> UpdateResult | None:
    """Return the newer remote version, or None when up to date or unknown."""
    if session is None:
        timeout = aiohttp.ClientTimeout(total=TIMEOUT_S)
        async with aiohttp.ClientSession(timeout=timeout) as owned:
            tag = await fetch_latest_tag(owned)
    else:
        tag = await fetch_latest_tag(session)

    if not tag:
        return None
    remote = tag[1:] if tag.startswith("v") else tag
    if not is_newer(remote, current_version):
        return None
    return UpdateResult(current_version=current_version, remote_version=remote)
