"""Validate tool arguments and build provider options.

Everything here runs before a dialog opens, so rule violations surface as
`ValidationError` without touching the presentation backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from consult_user.errors import ValidationError
from consult_user.types import (
    ASK_TYPES,
    DEFAULT_POSITION,
    POSITIONS,
    QUESTION_MODES,
    QUESTION_TYPES,
    ChooseOptions,
    ConfirmOptions,
    NotifyOptions,
    Question,
    QuestionOption,
    QuestionsOptions,
    TextInputOptions,
)
from consult_user.validate import validate_no_all_of_above

MAX_BODY = 1000
MAX_CHOICES = 20
MAX_QUESTIONS = 10
MAX_QUESTION_ID = 50
MAX_QUESTION = 500
MAX_OPTION = 100
MAX_BUTTON = 20
MAX_TITLE = 80


def unescape_literals(text: str) -> str:
    """Turn literal ``\\n`` / ``\\t`` (as LLMs often emit them) into real newlines/tabs."""
    return text.replace("\\n", "\n").replace("\\t", "\t")


def _str(
    args: dict[str, Any],
    key: str,
    *,
    default: str | None = None,
    required: bool = False,
    max_length: int | None = None,
) -> str | None:
    value = args.get(key)
    if value is None:
        if required:
            raise ValidationError(f"'{key}' is required")
        return default
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string")
    if required and not value.strip():
        raise ValidationError(f"'{key}' must not be empty")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"'{key}' must be at most {max_length} characters")
    return value


def _bool(args: dict[str, Any], key: str, default: bool = False) -> bool:
    value = args.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"'{key}' must be a boolean")
    return value


def _str_list(args: dict[str, Any], key: str) -> list[str] | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"'{key}' must be a list of strings")
    return list(value)


def _choice(args: dict[str, Any], key: str, allowed: tuple[str, ...], default: str) -> str:
    value = _str(args, key, default=default)
    if value not in allowed:
        raise ValidationError(f"'{key}' must be one of: {', '.join(allowed)}")
    return value


def parse_body(args: dict[str, Any]) -> str:
    return unescape_literals(_str(args, "body", required=True, max_length=MAX_BODY))


def parse_position(args: dict[str, Any]) -> str:
    return _choice(args, "position", POSITIONS, DEFAULT_POSITION)


def parse_title(args: dict[str, Any]) -> str | None:
    return _str(args, "title", max_length=MAX_TITLE)


def _check_labels(labels: Iterable[str], what: str) -> None:
    for label in labels:
        if len(label) > MAX_OPTION:
            raise ValidationError(f"{what} must be at most {MAX_OPTION} characters each")


def _parse_question(raw: Any, number: int) -> Question:
    if not isinstance(raw, dict):
        raise ValidationError(f"Question {number} must be an object")
    qid = _str(raw, "id", required=True, max_length=MAX_QUESTION_ID)
    text = _str(raw, "question", required=True, max_length=MAX_QUESTION)
    qtype = _choice(raw, "type", QUESTION_TYPES, "choice")
    descriptions = _str_list(raw, "descriptions") or []

    raw_options = raw.get("options") or []
    if not isinstance(raw_options, list):
        raise ValidationError(f"Question '{qid}' options must be a list")
    options: list[QuestionOption] = []
    for i, opt in enumerate(raw_options):
        if isinstance(opt, str):
            desc = descriptions[i] if i < len(descriptions) else None
            options.append(QuestionOption(label=opt, description=desc or None))
        elif isinstance(opt, dict) and isinstance(opt.get("label"), str) and opt["label"]:
            desc = opt.get("description")
            options.append(QuestionOption(label=opt["label"], description=desc if isinstance(desc, str) else None))
        else:
            raise ValidationError(f"Question '{qid}' has an invalid option at position {i + 1}")

    if qtype == "choice":
        if len(options) < 2:
            raise ValidationError(f"Question '{qid}': options required (min 2) for choice questions")
        _check_labels((o.label for o in options), f"Question '{qid}' options")
        validate_no_all_of_above(o.label for o in options)

    multi = raw.get("multiSelect", raw.get("multi", False))
    if not isinstance(multi, bool):
        raise ValidationError(f"Question '{qid}': multi must be a boolean")

    return Question(
        id=qid,
        question=unescape_literals(text),
        type=qtype,
        options=options,
        multi_select=multi,
        placeholder=_str(raw, "placeholder"),
        hidden=_bool(raw, "hidden"),
    )


@dataclass
class AskRequest:
    """A validated ``ask`` call, ready to route to one provider operation."""

    type: str
    body: str
    position: str = DEFAULT_POSITION
    title: str | None = None
    project_path: str | None = None
    options: Any = field(default=None, repr=False)

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> "AskRequest":
        if not isinstance(args, dict):
            raise ValidationError("ask arguments must be an object")
        ask_type = _str(args, "type", required=True)
        if ask_type not in ASK_TYPES:
            raise ValidationError(f"'type' must be one of: {', '.join(ASK_TYPES)}")

        body = parse_body(args)
        position = parse_position(args)
        title = parse_title(args)
        project_path = _str(args, "project_path")

        if ask_type == "confirm":
            options: Any = ConfirmOptions(
                body=body,
                title=title or "Confirmation",
                confirm_label=_str(args, "yes", default="Yes", max_length=MAX_BUTTON),
                cancel_label=_str(args, "no", default="No", max_length=MAX_BUTTON),
                position=position,
            )
        elif ask_type == "pick":
            choices = _str_list(args, "choices")
            if not choices:
                raise ValidationError("choices required for type=pick")
            if len(choices) > MAX_CHOICES:
                raise ValidationError(f"At most {MAX_CHOICES} choices are supported")
            if any(not c.strip() for c in choices):
                raise ValidationError("choices must not be empty strings")
            _check_labels(choices, "choices")
            validate_no_all_of_above(choices)
            options = ChooseOptions(
                body=body,
                title=title,
                choices=choices,
                descriptions=_str_list(args, "descriptions"),
                allow_multiple=_bool(args, "multi"),
                default_selection=_str(args, "default"),
                position=position,
            )
        elif ask_type == "text":
            options = TextInputOptions(
                body=body,
                title=title or "Input",
                default_value=_str(args, "default", default=""),
                hidden=_bool(args, "hidden"),
                position=position,
            )
        else:
            raw_questions = args.get("questions")
            if not isinstance(raw_questions, list) or not raw_questions:
                raise ValidationError("questions required for type=form")
            if len(raw_questions) > MAX_QUESTIONS:
                raise ValidationError(f"At most {MAX_QUESTIONS} questions are supported")
            questions = [_parse_question(q, i + 1) for i, q in enumerate(raw_questions)]
            ids = [q.id for q in questions]
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                raise ValidationError(f"Duplicate question ids: {', '.join(dupes)}")
            options = QuestionsOptions(
                body=body,
                title=title,
                questions=questions,
                mode=_choice(args, "mode", QUESTION_MODES, "wizard"),
                position=position,
            )

        return cls(
            type=ask_type,
            body=body,
            position=position,
            title=title,
            project_path=project_path,
            options=options,
        )


def parse_notify(args: dict[str, Any]) -> NotifyOptions:
    if not isinstance(args, dict):
        raise ValidationError("notify arguments must be an object")
    return NotifyOptions(
        body=parse_body(args),
        title=_str(args, "title", default="Notice", max_length=MAX_TITLE),
        sound=_bool(args, "sound", default=True),
    )
