from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from src.templates.fixtures.templates import SUGGESTED_VARIABLES

# {{name}} where name is an ASCII identifier; anything else stays literal.
VARIABLE_PATTERN = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}")

# "@search" typed right before the caret opens the variable picker.
MENTION_PATTERN = re.compile(r"@(\w*)\Z")


@dataclass(frozen=True)
class VariableSuggestion:
    name: str
    suggested: bool


def extract_variables(text: str) -> List[str]:
    """
    Returns the distinct placeholder names in `text`, in first-occurrence order.
    Malformed brace sequences are ignored, never rejected.
    """
    seen: Dict[str, None] = {}
    for match in VARIABLE_PATTERN.finditer(text or ""):
        seen.setdefault(match.group(1), None)
    return list(seen)


def substitute_variables(text: str, values: Mapping[str, Optional[str]]) -> str:
    """
    Replaces every placeholder with its value, or "" when the value is missing.
    Single pass: placeholders inside substituted values are left as-is.
    """

    def _replace(match: re.Match) -> str:
        value = values.get(match.group(1))
        return "" if value is None else str(value)

    return VARIABLE_PATTERN.sub(_replace, text or "")


def suggest_variables(
    text: str,
    query: str = "",
    suggested: Iterable[str] = SUGGESTED_VARIABLES,
) -> List[VariableSuggestion]:
    # names already used in the body come first, then the common ones
    entries: Dict[str, VariableSuggestion] = {}
    for name in extract_variables(text):
        entries[name] = VariableSuggestion(name=name, suggested=False)
    for name in suggested:
        entries.setdefault(name, VariableSuggestion(name=name, suggested=True))

    needle = (query or "").lower()
    return [v for v in entries.values() if needle in v.name.lower()]


def insert_variable(text: str, caret: int, name: str) -> Tuple[str, int]:
    """
    Replaces the `@search` run that ends at `caret` with `{{name}}`.
    Without such a run the token is inserted at the caret.
    Returns the new text and the caret position right after the token.
    """
    caret = max(0, min(caret, len(text)))
    before, after = text[:caret], text[caret:]

    trigger = MENTION_PATTERN.search(before)
    at = trigger.start() if trigger else caret

    token = "{{" + name + "}}"
    return before[:at] + token + after, at + len(token)


def append_variable(text: str, name: str) -> str:
    """Inserts `{{name}}` at the end of `text`, consuming a trailing `@search`."""
    return insert_variable(text, len(text), name)[0]
