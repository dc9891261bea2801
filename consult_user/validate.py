"""Reject pseudo-options that stand in for multi-select."""

from __future__ import annotations

import re
from typing import Iterable

from consult_user.errors import ValidationError

_ALL_OF_THE_ABOVE = re.compile(
    r"^\s*("
    r"all\s+(of\s+the\s+above|the\s+above|of\s+these|options)"
    r"|select\s+all"
    r"|everything(\s+above)?"
    r"|none\s+(of\s+the\s+above|of\s+these)"
    r")\s*$",
    re.IGNORECASE,
)


def is_all_of_the_above(option: str) -> bool:
    return bool(_ALL_OF_THE_ABOVE.match(option or ""))


def validate_no_all_of_above(options: Iterable[str]) -> None:
    for option in options:
        if is_all_of_the_above(option):
            raise ValidationError(
                f'Do not include "{option.strip()}" style options. If the user should be '
                "able to select multiple answers, set multi: true instead."
            )
