"""Resolve a ``{v}`` search pattern to the numeric literal it matches."""

from __future__ import annotations

import re
from pathlib import Path

from consult_user.errors import ResolveError
from consult_user.resolvers.utils import NUMBER_PATTERN, ResolvedLocation, offset_to_position, read_content

PLACEHOLDER = "{v}"
_LEADING_UNIT = re.compile(r"^([a-zA-Z%]+)")


def resolve_text_search(
    file_path: str | Path,
    search: str,
    *,
    content: str | None = None,
) -> ResolvedLocation:
    """Find the first ``left + number + right`` match for ``"left{v}right"``."""
    parts = search.split(PLACEHOLDER)
    if len(parts) != 2:
        raise ResolveError(f'Search pattern must contain exactly one "{PLACEHOLDER}" placeholder')

    left, right = parts
    unit_match = _LEADING_UNIT.match(right)
    unit = unit_match.group(1) if unit_match else ""

    pattern = re.compile(re.escape(left) + f"({NUMBER_PATTERN})" + re.escape(right))
    content = read_content(file_path, content)
    m = pattern.search(content)
    if not m:
        raise ResolveError(f'Pattern "{search}" not found in {file_path}')

    number = m.group(1)
    line, column = offset_to_position(content, m.start(1))
    return ResolvedLocation(
        line=line,
        column=column,
        expected_text=number + unit,
        current=float(number),
        unit=unit,
    )
