"""Turn agent-supplied tweak parameters into exact file locations."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

from consult_user.errors import ValidationError
from consult_user.resolvers.css import resolve_css
from consult_user.resolvers.text_search import resolve_text_search
from consult_user.resolvers.utils import ResolvedLocation

log = logging.getLogger("tweak")

MAX_PARAMETERS = 20


def to_kebab_case(label: str) -> str:
    """``"Font Size"`` -> ``"font-size"``, ``"Line Height (px)"`` -> ``"line-height-px"``."""
    return re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-")


def _number(raw: dict[str, Any], key: str, *, required: bool = False) -> float | None:
    value = raw.get(key)
    if value is None:
        if required:
            raise ValidationError(f"Tweak parameter is missing '{key}'")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Tweak parameter '{key}' must be a number")
    return float(value)


def _int(raw: dict[str, Any], key: str, *, minimum: int) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValidationError(f"Tweak parameter '{key}' must be an integer >= {minimum}")
    return value


def _str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Tweak parameter '{key}' must be a string")
    return value or None


@dataclass
class TweakParameter:
    label: str
    file: str
    min: float
    max: float
    id: str | None = None
    element: str | None = None
    step: float | None = None
    unit: str | None = None
    # CSS mode
    selector: str | None = None
    css_property: str | None = None
    index: int | None = None
    fn: str | None = None
    # Text-search mode
    search: str | None = None
    # Direct mode (also filled in by the resolvers)
    line: int | None = None
    column: int | None = None
    expected_text: str | None = None
    current: float | None = None

    @classmethod
    def from_arguments(cls, raw: dict[str, Any]) -> "TweakParameter":
        if not isinstance(raw, dict):
            raise ValidationError("Each tweak parameter must be an object")
        label = _str(raw, "label")
        file = _str(raw, "file")
        if not label:
            raise ValidationError("Tweak parameter is missing 'label'")
        if not file:
            raise ValidationError(f"Tweak parameter '{label}' is missing 'file'")
        step = _number(raw, "step")
        if step is not None and step <= 0:
            raise ValidationError(f"Tweak parameter '{label}' step must be positive")

        param = cls(
            label=label,
            file=file,
            min=_number(raw, "min", required=True),
            max=_number(raw, "max", required=True),
            id=_str(raw, "id"),
            element=_str(raw, "element"),
            step=step,
            unit=_str(raw, "unit"),
            selector=_str(raw, "selector"),
            css_property=_str(raw, "property"),
            index=_int(raw, "index", minimum=0),
            fn=_str(raw, "fn"),
            search=_str(raw, "search"),
            line=_int(raw, "line", minimum=1),
            column=_int(raw, "column", minimum=1),
            expected_text=_str(raw, "expectedText"),
            current=_number(raw, "current"),
        )
        if param.mode is None:
            raise ValidationError(
                f"Tweak parameter '{label}': provide selector+property (CSS), search "
                "(text search), or line+column+expectedText+current (direct)"
            )
        return param

    @property
    def mode(self) -> str | None:
        if self.selector and self.css_property:
            return "css"
        if self.search:
            return "search"
        if (
            self.line is not None
            and self.column is not None
            and self.expected_text
            and self.current is not None
        ):
            return "direct"
        return None

    @property
    def resolved_id(self) -> str:
        return self.id or to_kebab_case(self.label)

    def resolve(self, project_path: str = "", *, content: str | None = None) -> ResolvedLocation:
        """Locate this parameter's literal in the current file contents."""
        path = os.path.join(project_path, self.file) if project_path else self.file
        if self.mode == "css":
            return resolve_css(
                path,
                self.selector or "",
                self.css_property or "",
                index=self.index or 0,
                fn=self.fn,
                content=content,
            )
        if self.mode == "search":
            return resolve_text_search(path, self.search or "", content=content)
        return ResolvedLocation(
            line=self.line or 1,
            column=self.column or 1,
            expected_text=self.expected_text or "",
            current=self.current if self.current is not None else 0.0,
            unit=self.unit or "",
        )

    def to_payload(self, location: ResolvedLocation) -> dict[str, Any]:
        element = self.element
        if element is None and self.mode == "css":
            element = self.selector
        payload = {
            "id": self.resolved_id,
            "label": self.label,
            "element": element,
            "file": self.file,
            "line": location.line,
            "column": location.column,
            "expectedText": location.expected_text,
            "current": location.current,
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "unit": self.unit if self.unit is not None else location.unit,
        }
        return {k: v for k, v in payload.items() if v is not None}


def resolve_tweak_parameters(raw_params: list[Any], project_path: str = "") -> list[dict[str, Any]]:
    """Validate, resolve and id every parameter; duplicate ids are rejected."""
    if not isinstance(raw_params, list) or not raw_params:
        raise ValidationError("parameters required for tweak (at least one)")
    if len(raw_params) > MAX_PARAMETERS:
        raise ValidationError(f"At most {MAX_PARAMETERS} tweak parameters are supported")

    params = [TweakParameter.from_arguments(raw) for raw in raw_params]

    seen: set[str] = set()
    dupes: list[str] = []
    for p in params:
        pid = p.resolved_id
        if pid in seen and pid not in dupes:
            dupes.append(pid)
        seen.add(pid)
    if dupes:
        raise ValidationError(f"Duplicate parameter ids: {', '.join(dupes)}")

    resolved = []
    for p in params:
        location = p.resolve(project_path)
        log.debug(
            f"Resolved {p.resolved_id} ({p.mode}) -> "
            f"L{location.line}:C{location.column} {location.expected_text!r}"
        )
        resolved.append(p.to_payload(location))
    return resolved
