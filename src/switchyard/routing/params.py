"""Matched attribute conversion.

Path attributes are always captured as strings. When a handler annotates
the receiving parameter with a scalar type, the string is converted;
values that don't parse are passed through unchanged.
"""

from collections.abc import Callable
from typing import Any

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def _to_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"invalid boolean literal: {value!r}"
    raise ValueError(msg)


# annotation -> converter for each supported scalar
CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: _to_bool,
}


def convert_attribute(value: Any, annotation: Any) -> Any:
    """Convert a matched attribute to *annotation* if it is a known scalar.

    Non-string values and unknown annotations pass through untouched.
    """
    if not isinstance(value, str):
        return value
    converter = CONVERTERS.get(annotation)
    if converter is None:
        return value
    try:
        return converter(value)
    except ValueError:
        return value
