"""Collapse verbose dialog results into the compact form the agent sees.

A raw result is first classified into exactly one outcome, in priority order:

    snoozed > ask differently > feedback > cancelled > answered

Feedback is the only additive outcome: it may still carry a partial answer.
Form answers also survive cancellation so completed sub-answers are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union, cast

from consult_user.types import (
    COMPACT_TYPES,
    RESULT_TYPES,
    ConfirmResult,
    DialogResult,
    QuestionsResult,
    TweakResult,
    parse_raw_result,
)


@dataclass(frozen=True)
class Snoozed:
    remaining_seconds: int | None = None


@dataclass(frozen=True)
class Redirected:
    ask_differently: str


@dataclass(frozen=True)
class Feedback:
    feedback_text: str
    answer: Any = None
    completed_count: int | None = None


@dataclass(frozen=True)
class Cancelled:
    # Only forms keep a partial answer through cancellation.
    answer: Any = None
    completed_count: int | None = None


@dataclass(frozen=True)
class Answered:
    answer: Any = None
    completed_count: int | None = None
    action: str | None = None
    replay_animations: bool | None = None


Outcome = Union[Snoozed, Redirected, Feedback, Cancelled, Answered]


def _extract_answer(ask_type: str, raw: DialogResult, *, cancelled: bool, feedback: bool) -> dict[str, Any]:
    if ask_type == "confirm":
        if feedback or cancelled:
            return {}
        return {"answer": cast(ConfirmResult, raw).confirmed}

    if ask_type == "form":
        form = cast(QuestionsResult, raw)
        return {
            "answer": form.answers or None,
            "completed_count": form.completed_count if form.completed_count > 0 else None,
        }

    if cancelled:
        return {}

    if ask_type == "tweak":
        return {"answer": cast(TweakResult, raw).answers or None}

    return {"answer": getattr(raw, "answer", None)}


def classify(ask_type: str, raw: DialogResult | dict[str, Any]) -> Outcome:
    """Reduce a raw result to its single agent-visible outcome."""
    if ask_type not in COMPACT_TYPES:
        raise ValueError(f"Unknown dialog type: {ask_type}")
    if isinstance(raw, dict):
        raw = parse_raw_result(ask_type, raw)
    elif not isinstance(raw, RESULT_TYPES[ask_type]):
        raise ValueError(f"Expected {RESULT_TYPES[ask_type].__name__} for {ask_type}, got {type(raw).__name__}")

    if raw.snoozed:
        return Snoozed(remaining_seconds=raw.remaining_seconds)

    if raw.ask_differently:
        return Redirected(ask_differently=raw.ask_differently)

    feedback = raw.feedback_text
    cancelled = not feedback and (raw.cancelled or raw.dismissed)
    extracted = _extract_answer(ask_type, raw, cancelled=cancelled, feedback=bool(feedback))

    if feedback:
        return Feedback(feedback_text=feedback, **extracted)
    if cancelled:
        return Cancelled(**extracted)

    if isinstance(raw, TweakResult):
        return Answered(
            action=raw.action,
            replay_animations=raw.replay_animations,
            **extracted,
        )
    return Answered(**extracted)


def _strip_nulls(obj: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in obj.items() if v is not None}


def to_compact(outcome: Outcome) -> dict[str, Any]:
    if isinstance(outcome, Snoozed):
        out: dict[str, Any] = {"snoozed": True, "remainingSeconds": outcome.remaining_seconds}
    elif isinstance(outcome, Redirected):
        out = {"askDifferently": outcome.ask_differently}
    elif isinstance(outcome, Feedback):
        out = {
            "feedbackText": outcome.feedback_text,
            "answer": outcome.answer,
            "completedCount": outcome.completed_count,
        }
    elif isinstance(outcome, Cancelled):
        out = {
            "cancelled": True,
            "answer": outcome.answer,
            "completedCount": outcome.completed_count,
        }
    elif isinstance(outcome, Answered):
        out = {
            "answer": outcome.answer,
            "completedCount": outcome.completed_count,
            "action": outcome.action,
            "replayAnimations": outcome.replay_animations,
        }
    else:
        raise TypeError(f"Unhandled outcome: {outcome!r}")
    return _strip_nulls(out)


def compact_response(ask_type: str, raw: DialogResult | dict[str, Any]) -> dict[str, Any]:
    return to_compact(classify(ask_type, raw))
