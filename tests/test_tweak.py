from __future__ import annotations

import pytest

from consult_user.errors import ResolveError, ValidationError
from consult_user.resolvers.tweak import TweakParameter, resolve_tweak_parameters, to_kebab_case


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Font Size", "font-size"),
        ("Line Height (px)", "line-height-px"),
        ("  Gap  ", "gap"),
        ("rotateY", "rotatey"),
    ],
)
def test_kebab_case(label, expected):
    assert to_kebab_case(label) == expected


@pytest.fixture()
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.css").write_text(
        ".hero h1 {\n  font-size: 2.5rem;\n  margin: 8px 16px;\n}\n", encoding="utf-8"
    )
    (tmp_path / "src" / "theme.ts").write_text("export const gap = '16px';\n", encoding="utf-8")
    return tmp_path


def test_modes():
    base = {"label": "X", "file": "a.css", "min": 0, "max": 10}
    assert TweakParameter.from_arguments({**base, "selector": ".a", "property": "width"}).mode == "css"
    assert TweakParameter.from_arguments({**base, "search": "w: {v}px"}).mode == "search"
    direct = {**base, "line": 3, "column": 5, "expectedText": "4px", "current": 4}
    assert TweakParameter.from_arguments(direct).mode == "direct"


def test_parameter_without_locator_is_rejected():
    with pytest.raises(ValidationError, match="selector\\+property"):
        TweakParameter.from_arguments({"label": "X", "file": "a.css", "min": 0, "max": 1})


@pytest.mark.parametrize(
    "raw",
    [
        {"file": "a.css", "min": 0, "max": 1, "search": "{v}"},
        {"label": "X", "min": 0, "max": 1, "search": "{v}"},
        {"label": "X", "file": "a.css", "max": 1, "search": "{v}"},
        {"label": "X", "file": "a.css", "min": 0, "max": 1, "step": 0, "search": "{v}"},
        {"label": "X", "file": "a.css", "min": "0", "max": 1, "search": "{v}"},
        {"label": "X", "file": "a.css", "min": 0, "max": 1, "index": -1, "selector": ".a", "property": "w"},
    ],
)
def test_invalid_parameters(raw):
    with pytest.raises(ValidationError):
        TweakParameter.from_arguments(raw)


def test_resolves_relative_to_project_path(project):
    params = resolve_tweak_parameters(
        [
            {"label": "Font Size", "file": "src/app.css", "selector": ".hero h1", "property": "font-size",
             "min": 1, "max": 5, "step": 0.25},
            {"id": "right-margin", "label": "Margin", "file": "src/app.css", "selector": ".hero h1",
             "property": "margin", "index": 1, "min": 0, "max": 64},
            {"label": "Gap", "file": "src/theme.ts", "search": "gap = '{v}px'", "min": 0, "max": 48,
             "element": "Toolbar"},
        ],
        str(project),
    )

    font, margin, gap = params
    assert font == {
        "id": "font-size",
        "label": "Font Size",
        "element": ".hero h1",
        "file": "src/app.css",
        "line": 2,
        "column": 14,
        "expectedText": "2.5rem",
        "current": 2.5,
        "min": 1.0,
        "max": 5.0,
        "step": 0.25,
        "unit": "rem",
    }
    assert margin["id"] == "right-margin"
    assert margin["expectedText"] == "16px"
    assert margin["column"] == 15
    assert gap["element"] == "Toolbar"
    assert gap["expectedText"] == "16px"
    assert gap["unit"] == "px"
    assert "step" not in gap


def test_caller_unit_wins(project):
    [param] = resolve_tweak_parameters(
        [{"label": "Gap", "file": "src/theme.ts", "search": "gap = '{v}px'", "min": 0, "max": 48, "unit": "rem"}],
        str(project),
    )
    assert param["unit"] == "rem"


def test_direct_mode_passes_through():
    [param] = resolve_tweak_parameters(
        [{"label": "Opacity", "file": "a.css", "line": 4, "column": 12, "expectedText": "0.8", "current": 0.8,
          "min": 0, "max": 1, "step": 0.05}],
    )
    assert (param["line"], param["column"], param["expectedText"], param["current"]) == (4, 12, "0.8", 0.8)
    assert param["unit"] == ""


def test_duplicate_ids_rejected_before_resolving(tmp_path):
    with pytest.raises(ValidationError, match="Duplicate parameter ids: font-size"):
        resolve_tweak_parameters(
            [
                {"label": "Font Size", "file": "missing.css", "search": "a{v}", "min": 0, "max": 1},
                {"id": "font-size", "label": "Other", "file": "missing.css", "search": "b{v}", "min": 0, "max": 1},
            ],
            str(tmp_path),
        )


def test_parameter_count_limits():
    with pytest.raises(ValidationError):
        resolve_tweak_parameters([])
    too_many = [
        {"label": f"P{i}", "file": "a.css", "line": 1, "column": 1, "expectedText": "1", "current": 1,
         "min": 0, "max": 2}
        for i in range(21)
    ]
    with pytest.raises(ValidationError, match="At most 20"):
        resolve_tweak_parameters(too_many)


def test_resolution_failure_names_the_problem(project):
    with pytest.raises(ResolveError, match='Selector ".missing" not found'):
        resolve_tweak_parameters(
            [{"label": "W", "file": "src/app.css", "selector": ".missing", "property": "width", "min": 0, "max": 1}],
            str(project),
        )


def test_css_property_argument_is_kept():
    param = TweakParameter.from_arguments(
        {"label": "Width", "file": "a.css", "selector": ".a", "property": "width", "min": 0, "max": 10}
    )
    assert param.css_property == "width"
    assert param.mode == "css"
    assert param.resolved_id == "width"
    loc = param.resolve(content=".a {\n  width: 4px;\n}\n")
    assert (loc.line, loc.column, loc.expected_text) == (2, 10, "4px")
