"""Locates and decodes the JSON object inside a free-form model response.

Models wrap their JSON in prose or markdown fences often enough that a plain
``json.loads`` is not a usable contract. ``parse_json_object`` never raises:
it returns ``Parsed`` with the decoded object or ``Fallback`` with a reason,
and callers substitute their typed default for the fallback case.
"""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Parsed:
    value: dict[str, Any]


@dataclass(frozen=True)
class Fallback:
    reason: str


ParseResult = Parsed | Fallback


def parse_json_object(raw: str) -> ParseResult:
    """Decode the first balanced ``{...}`` span in ``raw``."""
    span = find_object_span(raw)
    if span is None:
        return Fallback("no JSON object found in response")
    start, end = span
    try:
        value = json.loads(raw[start:end])
    except json.JSONDecodeError as exc:
        return Fallback(f"invalid JSON object: {exc.msg}")
    if not isinstance(value, dict):
        return Fallback("JSON response must be an object")
    return Parsed(value)


def find_object_span(raw: str) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the first balanced object, or None.

    Braces inside string literals are ignored, so descriptions such as
    ``"4} pipe jack"`` do not end the object early.
    """
    start = raw.find("{")
    while start != -1:
        end = _match_closing_brace(raw, start)
        if end is not None:
            return start, end
        start = raw.find("{", start + 1)
    return None


def _match_closing_brace(raw: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(raw)):
        char = raw[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return None
