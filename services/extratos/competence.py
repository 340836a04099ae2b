from __future__ import annotations

import re

COMPETENCE_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{4}$")
_NON_DIGIT = re.compile(r"\D")

# "MM/YYYY"; also the input field cap
COMPETENCE_MAX_LEN = 7


def format_competence(raw: str | None) -> str:
    """Normalize free text into the MM/YYYY mask, keystroke by keystroke.

    "1" -> "1", "12" -> "12", "123" -> "12/3", "12a2024xx9" -> "12/2024".
    """
    digits = _NON_DIGIT.sub("", raw or "")[:6]
    if len(digits) <= 2:
        return digits
    return f"{digits[:2]}/{digits[2:]}"


def is_valid_competence(value: str) -> bool:
    return bool(COMPETENCE_RE.fullmatch(value or ""))
