"""Shared helpers for locating numeric literals in source text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from consult_user.errors import ResolveError

NUMBER_PATTERN = r"[+-]?\d*\.?\d+"
_NUMERIC_TOKEN = re.compile(rf"^({NUMBER_PATTERN})([a-zA-Z%]*)")


@dataclass(frozen=True)
class ResolvedLocation:
    """Where a numeric literal sits; ``expected_text`` starts at (line, column)."""

    line: int
    column: int
    expected_text: str
    current: float
    unit: str


def split_numeric_suffix(text: str) -> tuple[str, float, str]:
    """Split ``"2.5rem"`` into ``("2.5rem", 2.5, "rem")``.

    The first element is the literal prefix that was parsed, so trailing
    punctuation such as a comma or ``!important`` is left out.
    """
    m = _NUMERIC_TOKEN.match(text)
    if not m:
        raise ResolveError(f'Cannot parse numeric value from "{text}"')
    return m.group(0), float(m.group(1)), m.group(2)


def offset_to_position(content: str, offset: int) -> tuple[int, int]:
    """Convert a character offset to 1-indexed (line, column)."""
    line = content.count("\n", 0, offset) + 1
    last_nl = content.rfind("\n", 0, offset)
    return line, offset - last_nl


def read_content(file_path: str | Path, content: str | None) -> str:
    if content is not None:
        return content
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ResolveError(f"Cannot read {file_path}: {e}") from e
