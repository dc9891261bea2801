"""Turn compact responses into one plain sentence for the agent."""

from __future__ import annotations

from typing import Any

# askDifferently identifiers -> natural-language re-ask instructions.
ASK_DIFFERENTLY = {
    "confirm": "a yes/no confirmation (type: confirm)",
    "pick": "a single-select list (type: pick)",
    "pick-multi": "a multi-select list (type: pick, multi: true)",
    "text": "a text input (type: text)",
    "text-hidden": "a password input (type: text, hidden: true)",
    "form-wizard": "a step-by-step wizard (type: form, mode: wizard)",
    "form-accordion": "an accordion form (type: form, mode: accordion)",
}

TWEAK_ACTIONS = {
    "file": "The values were saved to the files.",
    "agent": "The files were reverted; apply these values yourself.",
}

DEFAULT_SNOOZE_SECONDS = 60


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(_format_value(v) for v in value)
    return str(value)


def _format_answer(answer: Any, completed_count: int | None) -> str:
    if answer is None:
        return "The user responded without an answer."
    if isinstance(answer, bool):
        return "The user confirmed." if answer else "The user declined."
    if isinstance(answer, str):
        return f"The user responded: {answer}"
    if isinstance(answer, (list, tuple)):
        return f"The user selected: {', '.join(_format_value(a) for a in answer)}"
    if isinstance(answer, dict):
        parts = [f"{k}: {_format_value(v)}" for k, v in answer.items()]
        suffix = f" ({completed_count}/{len(answer)} completed)" if completed_count is not None else ""
        return f"The user answered: {', '.join(parts)}{suffix}"
    return f"The user responded: {_format_value(answer)}"


def humanize(compact: dict[str, Any]) -> str:
    """Every compact response becomes a sentence; no JSON for the agent to parse."""
    if compact.get("snoozed"):
        seconds = compact.get("remainingSeconds")
        if seconds is None:
            seconds = DEFAULT_SNOOZE_SECONDS
        return f"The user snoozed. Run `sleep {seconds}`, then retry the exact same question."

    ask_differently = compact.get("askDifferently")
    if ask_differently:
        desc = ASK_DIFFERENTLY.get(str(ask_differently), str(ask_differently))
        return f"The user wants this question re-asked as {desc}."

    feedback = compact.get("feedbackText")
    if feedback:
        return f'The user gave feedback: "{feedback}". Adjust your approach, then re-ask.'

    if compact.get("cancelled"):
        return "The user cancelled. Proceed with a reasonable default."

    text = _format_answer(compact.get("answer"), compact.get("completedCount"))
    action = compact.get("action")
    if action in TWEAK_ACTIONS:
        text = f"{text} {TWEAK_ACTIONS[action]}"
    return text
