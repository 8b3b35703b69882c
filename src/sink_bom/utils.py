"""
Utility functions for identifier handling and loose value coercion.

This module handles the low-level formatting logic, including:
- Natural sorting of part numbers (T2-B2 before T2-B10).
- Identifier cleanup for values arriving from form posts ('undefined', '').
- Integer coercion for quantities and dimensions typed as strings.
"""

import re
from typing import Any

# Form posts occasionally serialize missing selections as these strings.
_NULLISH_STRINGS = {"", "undefined", "null", "none"}


def natural_sort_key(ref: str) -> list[Any]:
    """
    Generates a sort key for natural alphanumeric sorting.

    Splits strings into text and numeric chunks so that 'T2-B10' comes
    after 'T2-B2', rather than 'T2-B1'.

    Args:
        ref: The identifier string (e.g., "T2-B10").

    Returns:
        A list of mixed types (int/str) suitable for sort keys.
    """
    return [
        int(text) if text.isdigit() else text.upper()
        for text in re.split(r"(\d+)", ref)
    ]


def clean_id(value: Any) -> str | None:
    """
    Normalizes an identifier field.

    Args:
        value: Raw value from a configuration payload.

    Returns:
        The stripped identifier, or None for empty/'undefined'/'null' values.
    """
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _NULLISH_STRINGS:
        return None
    return text


def coerce_int(value: Any, default: int | None = None) -> int | None:
    """
    Converts loose numeric input ('48', 48.0, ' 60 ') to int.

    Args:
        value: The raw value.
        default: Returned when the value is missing or not numeric.

    Returns:
        The integer value, or `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    if not number.is_integer():
        return default
    return int(number)


def clean_id_list(values: Any) -> tuple[str, ...]:
    """Cleans a list of identifiers, dropping empty entries."""
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    cleaned = (clean_id(v) for v in values)
    return tuple(v for v in cleaned if v)
