"""Request and result shapes exchanged with the dialog executable.

Requests serialise to the camelCase JSON the executable expects. Raw results
are parsed leniently: every outcome field is optional on the wire, so the
compactor can apply one priority rule across all dialog types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

POSITIONS = ("left", "center", "right")
DEFAULT_POSITION = "left"

QUESTION_MODES = ("wizard", "accordion")
QUESTION_TYPES = ("choice", "text")

ASK_TYPES = ("confirm", "pick", "text", "form")
COMPACT_TYPES = ASK_TYPES + ("tweak",)


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


@dataclass
class ConfirmOptions:
    body: str
    title: str = "Confirmation"
    confirm_label: str = "Yes"
    cancel_label: str = "No"
    position: str = DEFAULT_POSITION

    def to_payload(self) -> dict[str, Any]:
        return {
            "body": self.body,
            "title": self.title,
            "confirmLabel": self.confirm_label,
            "cancelLabel": self.cancel_label,
            "position": self.position,
        }


@dataclass
class ChooseOptions:
    body: str
    choices: list[str]
    descriptions: list[str] | None = None
    allow_multiple: bool = False
    default_selection: str | None = None
    title: str | None = None
    position: str = DEFAULT_POSITION

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "body": self.body,
                "title": self.title,
                "choices": list(self.choices),
                "descriptions": list(self.descriptions) if self.descriptions is not None else None,
                "allowMultiple": self.allow_multiple,
                "defaultSelection": self.default_selection,
                "position": self.position,
            }
        )


@dataclass
class TextInputOptions:
    body: str
    title: str = "Input"
    default_value: str = ""
    hidden: bool = False
    position: str = DEFAULT_POSITION

    def to_payload(self) -> dict[str, Any]:
        return {
            "body": self.body,
            "title": self.title,
            "defaultValue": self.default_value,
            "hidden": self.hidden,
            "position": self.position,
        }


@dataclass
class QuestionOption:
    label: str
    description: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none({"label": self.label, "description": self.description})


@dataclass
class Question:
    id: str
    question: str
    type: str = "choice"
    options: list[QuestionOption] = field(default_factory=list)
    multi_select: bool = False
    placeholder: str | None = None
    hidden: bool = False

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "question": self.question,
                "type": self.type,
                "options": [o.to_payload() for o in self.options],
                "multiSelect": self.multi_select,
                "placeholder": self.placeholder,
                "hidden": self.hidden,
            }
        )


@dataclass
class QuestionsOptions:
    body: str
    questions: list[Question]
    mode: str = "wizard"
    title: str | None = None
    position: str = DEFAULT_POSITION

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "body": self.body,
                "title": self.title,
                "questions": [q.to_payload() for q in self.questions],
                "mode": self.mode,
                "position": self.position,
            }
        )


@dataclass
class NotifyOptions:
    body: str
    title: str = "Notice"
    sound: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {"body": self.body, "title": self.title, "sound": self.sound}


@dataclass
class PreviewOptions:
    body: str

    def to_payload(self) -> dict[str, Any]:
        return {"body": self.body}


@dataclass
class TweakOptions:
    body: str
    # Already resolved: each entry carries id, line, column, expectedText, current.
    parameters: list[dict[str, Any]]
    title: str | None = None
    position: str = DEFAULT_POSITION

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "body": self.body,
                "title": self.title,
                "parameters": [dict(p) for p in self.parameters],
                "position": self.position,
            }
        )


def _opt_bool(value: object) -> bool:
    return value is True


def _opt_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _opt_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


@dataclass
class DialogResult:
    """Outcome fields shared by every blocking dialog result."""

    cancelled: bool = False
    dismissed: bool = False
    comment: str | None = None
    snoozed: bool = False
    snooze_minutes: int | None = None
    remaining_seconds: int | None = None
    feedback_text: str | None = None
    ask_differently: str | None = None
    instruction: str | None = None

    @staticmethod
    def _common(payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "cancelled": _opt_bool(payload.get("cancelled")),
            "dismissed": _opt_bool(payload.get("dismissed")),
            "comment": _opt_str(payload.get("comment")),
            "snoozed": _opt_bool(payload.get("snoozed")),
            "snooze_minutes": _opt_int(payload.get("snoozeMinutes")),
            "remaining_seconds": _opt_int(payload.get("remainingSeconds")),
            "feedback_text": _opt_str(payload.get("feedbackText")),
            "ask_differently": _opt_str(payload.get("askDifferently")),
            "instruction": _opt_str(payload.get("instruction")),
        }


@dataclass
class ConfirmResult(DialogResult):
    confirmed: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ConfirmResult":
        return cls(confirmed=_opt_bool(payload.get("confirmed")), **cls._common(payload))


@dataclass
class ChoiceResult(DialogResult):
    answer: str | list[str] | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChoiceResult":
        answer = payload.get("answer")
        if isinstance(answer, list):
            answer = [str(a) for a in answer]
        elif answer is not None:
            answer = str(answer)
        return cls(answer=answer, **cls._common(payload))


@dataclass
class TextInputResult(DialogResult):
    answer: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TextInputResult":
        answer = payload.get("answer")
        return cls(answer=None if answer is None else str(answer), **cls._common(payload))


@dataclass
class QuestionsResult(DialogResult):
    answers: dict[str, str | list[str]] = field(default_factory=dict)
    completed_count: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QuestionsResult":
        answers = payload.get("answers")
        return cls(
            answers=dict(answers) if isinstance(answers, dict) else {},
            completed_count=_opt_int(payload.get("completedCount")) or 0,
            **cls._common(payload),
        )


@dataclass
class TweakResult(DialogResult):
    answers: dict[str, float] = field(default_factory=dict)
    action: str | None = None
    replay_animations: bool | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TweakResult":
        answers = payload.get("answers")
        replay = payload.get("replayAnimations")
        return cls(
            answers=dict(answers) if isinstance(answers, dict) else {},
            action=_opt_str(payload.get("action")),
            replay_animations=replay if isinstance(replay, bool) else None,
            **cls._common(payload),
        )


RawResult = ConfirmResult | ChoiceResult | TextInputResult | QuestionsResult | TweakResult

RESULT_TYPES: dict[str, type] = {
    "confirm": ConfirmResult,
    "pick": ChoiceResult,
    "text": TextInputResult,
    "form": QuestionsResult,
    "tweak": TweakResult,
}


def parse_raw_result(ask_type: str, payload: dict[str, Any]) -> RawResult:
    """Build the raw result dataclass for ``ask_type`` from executable JSON."""
    try:
        result_cls = RESULT_TYPES[ask_type]
    except KeyError:
        raise ValueError(f"Unknown dialog type: {ask_type}") from None
    return result_cls.from_payload(payload)
