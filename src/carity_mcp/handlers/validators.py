"""
Argument checks shared by the tool handlers

Numbers follow JSON semantics: ints and floats count, booleans do not.
"""

import math
from typing import Any, Optional


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_positive_integer(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is a positive whole number, else None.

    Integral floats such as ``3.0`` are accepted.
    """
    if not is_number(value):
        return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)
    return value if value > 0 else None


def is_positive_integer(value: Any) -> bool:
    return as_positive_integer(value) is not None


def is_optional_string(arguments: dict, key: str) -> bool:
    """True when ``key`` is absent, None, or a string"""
    return arguments.get(key) is None or isinstance(arguments[key], str)
