"""Lenient readers for model-produced JSON.

Model output is untrusted: fields go missing, numbers arrive as strings,
counts come back negative. Every reader returns a well-typed value and
falls back to the documented default instead of raising.
"""

import math
from typing import Any


def read_object(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def read_list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    return value if isinstance(value, list) else []


def read_number(value: Any) -> float | None:
    """Interpret ``value`` as a finite number, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def read_count(raw: dict[str, Any], key: str) -> int:
    """Non-negative integer count, 0 when missing or malformed."""
    number = read_number(raw.get(key))
    if number is None or number < 0:
        return 0
    return int(round(number))


def read_quantity(raw: dict[str, Any], key: str, default: float = 0.0) -> float:
    """Non-negative quantity, ``default`` when missing or malformed."""
    number = read_number(raw.get(key))
    if number is None or number < 0:
        return default
    return number


def read_optional_quantity(raw: dict[str, Any], key: str) -> float | None:
    """Non-negative quantity, None when missing or malformed."""
    number = read_number(raw.get(key))
    if number is None or number < 0:
        return None
    return number


def read_amount(raw: dict[str, Any], key: str, default: float = 0.0) -> float:
    """Monetary amount; may be negative (credits), ``default`` when missing."""
    number = read_number(raw.get(key))
    return default if number is None else number


def read_optional_amount(raw: dict[str, Any], key: str) -> float | None:
    return read_number(raw.get(key))


def read_optional_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() in {"null", "none", "n/a"}:
        return None
    return value


def read_str(raw: dict[str, Any], key: str, default: str = "") -> str:
    value = read_optional_str(raw, key)
    return default if value is None else value


def read_str_list(raw: dict[str, Any], key: str) -> list[str]:
    return [item for item in read_list(raw, key) if isinstance(item, str) and item.strip()]


def read_confidence(raw: dict[str, Any], default: float) -> float:
    """Self-reported confidence clamped to [0, 1]."""
    number = read_number(raw.get("confidence"))
    if number is None:
        return default
    return max(0.0, min(1.0, number))


def normalize_unit(value: str) -> str:
    return value.strip().upper()
