from __future__ import annotations

import re

import pytest

from conftest import position_to_offset
from consult_user.errors import ResolveError
from consult_user.resolvers.text_search import resolve_text_search


def _replace(content: str, loc, new_text: str) -> str:
    start = position_to_offset(content, loc.line, loc.column)
    assert content[start : start + len(loc.expected_text)] == loc.expected_text
    return content[:start] + new_text + content[start + len(loc.expected_text) :]


def test_resolves_and_tracks_a_written_value():
    content = "const styles = {\n  gap: '16px',\n};\n"
    loc = resolve_text_search("theme.ts", "gap: '{v}px'", content=content)
    assert (loc.line, loc.column) == (2, 9)
    assert loc.expected_text == "16px"
    assert loc.current == 16
    assert loc.unit == "px"

    updated = _replace(content, loc, "40px")
    again = resolve_text_search("theme.ts", "gap: '{v}px'", content=updated)
    assert again.expected_text == "40px"
    assert again.current == 40
    assert (again.line, again.column) == (loc.line, loc.column)


def test_same_line_literal_shifts_after_earlier_write():
    content = ".x {\n  transform: rotateX(10deg) rotateY(20deg);\n}\n"
    first = resolve_text_search("a.css", "rotateX({v}deg)", content=content)
    second = resolve_text_search("a.css", "rotateY({v}deg)", content=content)
    assert first.line == second.line

    updated = _replace(content, first, "125deg")
    moved = resolve_text_search("a.css", "rotateY({v}deg)", content=updated)
    assert moved.line == second.line
    assert moved.column == second.column + len("125deg") - len(first.expected_text)
    assert moved.expected_text == "20deg"


def test_unitless_number():
    loc = resolve_text_search("config.py", "retries = {v}", content="retries = 3\n")
    assert loc.expected_text == "3"
    assert loc.unit == ""


def test_regex_metacharacters_are_literal():
    loc = resolve_text_search("a.js", "scale({v}) + 1", content="x = scale(1.5) + 1;")
    assert loc.current == 1.5


@pytest.mark.parametrize("search", ["no placeholder", "{v} and {v}"])
def test_placeholder_count_is_enforced_before_reading(search, tmp_path):
    with pytest.raises(ResolveError, match="exactly one"):
        resolve_text_search(tmp_path / "does-not-exist.css", search)


def test_pattern_not_found():
    with pytest.raises(ResolveError, match=re.escape('Pattern "width: {v}px" not found in a.css')):
        resolve_text_search("a.css", "width: {v}px", content="height: 10px;")
