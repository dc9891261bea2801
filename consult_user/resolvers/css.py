"""Resolve a CSS selector + property to the numeric literal it declares."""

from __future__ import annotations

import re
from pathlib import Path

from consult_user.errors import ResolveError
from consult_user.resolvers.utils import (
    ResolvedLocation,
    offset_to_position,
    read_content,
    split_numeric_suffix,
)

_SVELTE_STYLE = re.compile(r"<style[^>]*>([\s\S]*?)</style>")


def _extract_css(content: str, file_path: str | Path) -> tuple[str, int]:
    """Return the stylesheet text and its offset within ``content``."""
    if Path(file_path).suffix == ".svelte":
        m = _SVELTE_STYLE.search(content)
        if not m:
            raise ResolveError(f"No <style> block found in Svelte file {file_path}")
        return m.group(1), m.start(1)
    return content, 0


def _find_selector_block(css: str, selector: str) -> tuple[int, str] | None:
    """Find the top-level block for ``selector``: (content start, content)."""
    pattern = re.compile(rf"(?:^|[\s,}}])\s*{re.escape(selector)}\s*\{{", re.MULTILINE)
    m = pattern.search(css)
    if not m:
        return None

    brace = css.index("{", m.start())
    depth = 1
    i = brace + 1
    while i < len(css) and depth > 0:
        if css[i] == "{":
            depth += 1
        elif css[i] == "}":
            depth -= 1
        i += 1

    end = i - 1 if depth == 0 else i
    return brace + 1, css[brace + 1 : end]


def _function_argument(value: str, fn: str, index: int) -> tuple[int, str] | None:
    m = re.search(rf"{re.escape(fn)}\(([^)]+)\)", value)
    if not m:
        return None

    # Offsets of each comma-separated argument inside the parentheses.
    args: list[tuple[int, str]] = []
    for part in re.finditer(r"[^,]+", m.group(1)):
        text = part.group(0)
        stripped = text.strip()
        if not stripped:
            continue
        args.append((m.start(1) + part.start() + text.index(stripped), stripped))
    if not args:
        return None
    return args[index] if index < len(args) else args[0]


def _token_at(value: str, index: int) -> tuple[int, str] | None:
    tokens = [(t.start(), t.group(0)) for t in re.finditer(r"\S+", value)]
    if index >= len(tokens):
        return None
    return tokens[index]


def _find_property_value(
    block: str,
    property_name: str,
    index: int,
    fn: str | None,
) -> tuple[int, str] | None:
    """Locate the target token. Returns (offset within block, token text)."""
    m = re.search(rf"(?:^|;|\s)\s*{re.escape(property_name)}\s*:", block, re.MULTILINE)
    if not m:
        return None

    colon_end = m.end()
    semi = block.find(";", colon_end)
    if semi == -1:
        return None

    raw_value = block[colon_end:semi]
    value = raw_value.strip()
    if not value:
        return None
    value_start = colon_end + raw_value.index(value)

    found = _function_argument(value, fn, index) if fn else _token_at(value, index)
    if found is None:
        return None
    offset, token = found
    return value_start + offset, token


def resolve_css(
    file_path: str | Path,
    selector: str,
    property_name: str,
    *,
    index: int = 0,
    fn: str | None = None,
    content: str | None = None,
) -> ResolvedLocation:
    """Resolve ``selector { property: ... }`` to a file location and value.

    ``index`` picks a whitespace-separated token (``margin: 10px 20px``) or,
    with ``fn``, an argument of that function (``transform: rotateY(12deg)``).
    ``content`` skips reading ``file_path``; the path is still used for the
    ``.svelte`` check and error messages.
    """
    content = read_content(file_path, content)
    css, css_offset = _extract_css(content, file_path)

    block = _find_selector_block(css, selector)
    if block is None:
        raise ResolveError(f'Selector "{selector}" not found in {file_path}')
    block_start, block_content = block

    found = _find_property_value(block_content, property_name, index, fn)
    if found is None:
        raise ResolveError(
            f'Property "{property_name}" not found in selector "{selector}" in {file_path}'
        )
    token_offset, token = found

    expected_text, current, unit = split_numeric_suffix(token)
    line, column = offset_to_position(content, css_offset + block_start + token_offset)
    return ResolvedLocation(
        line=line,
        column=column,
        expected_text=expected_text,
        current=current,
        unit=unit,
    )
