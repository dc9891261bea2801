from __future__ import annotations

import itertools

import pytest

from consult_user.compact import compact_response
from consult_user.humanize import humanize


def test_snooze_uses_remaining_seconds():
    text = humanize({"snoozed": True, "remainingSeconds": 120})
    assert text == "The user snoozed. Run `sleep 120`, then retry the exact same question."


def test_snooze_defaults_to_sixty_seconds():
    assert "`sleep 60`" in humanize({"snoozed": True})


def test_ask_differently_known_and_unknown():
    assert humanize({"askDifferently": "pick-multi"}) == (
        "The user wants this question re-asked as a multi-select list (type: pick, multi: true)."
    )
    assert humanize({"askDifferently": "slider"}) == "The user wants this question re-asked as slider."


def test_feedback_sentence():
    assert humanize({"feedbackText": "too vague", "answer": "x"}) == (
        'The user gave feedback: "too vague". Adjust your approach, then re-ask.'
    )


def test_cancelled_sentence():
    assert humanize({"cancelled": True, "answer": {"a": "b"}}) == (
        "The user cancelled. Proceed with a reasonable default."
    )


def test_answer_shapes():
    assert humanize({"answer": True}) == "The user confirmed."
    assert humanize({"answer": False}) == "The user declined."
    assert humanize({"answer": "blue"}) == "The user responded: blue"
    assert humanize({"answer": ["A", "B", "C"]}) == "The user selected: A, B, C"


def test_form_answer_with_completed_count():
    text = humanize({"answer": {"db": "PostgreSQL", "langs": ["Go", "Rust"]}, "completedCount": 2})
    assert text == "The user answered: db: PostgreSQL, langs: Go, Rust (2/2 completed)"


def test_form_answer_without_count():
    assert humanize({"answer": {"db": "SQLite"}}) == "The user answered: db: SQLite"


def test_tweak_action_suffix():
    text = humanize({"answer": {"font-size": 3.0}, "action": "file"})
    assert text == "The user answered: font-size: 3 The values were saved to the files."


def test_empty_compact_is_handled():
    assert humanize({}) == "The user responded without an answer."


_RAW_FIELDS = [
    {},
    {"snoozed": True},
    {"snoozed": True, "remainingSeconds": 30},
    {"askDifferently": "form-wizard"},
    {"feedbackText": "hmm"},
    {"cancelled": True},
    {"dismissed": True},
]
_ANSWERS = [
    {},
    {"answer": "a", "confirmed": True},
    {"answer": ["a", "b"], "answers": {"q1": "a"}, "completedCount": 1},
    {"answer": None, "answers": {"x": 1.5}, "action": "agent", "replayAnimations": True},
]


@pytest.mark.parametrize(
    "ask_type,outcome,answer",
    list(itertools.product(["confirm", "pick", "text", "form", "tweak"], _RAW_FIELDS, _ANSWERS)),
)
def test_humanize_is_total_over_compact_outputs(ask_type, outcome, answer):
    compact = compact_response(ask_type, {**answer, **outcome})
    text = humanize(compact)
    assert isinstance(text, str) and text
