"""
Loose number coercion for the label fields exchanged with the backend.

The backend stores geometry as loosely typed values (numbers, numeric strings,
nulls). Reading them follows the JavaScript ``Number()`` rules the web client
applies, so both clients agree on what a stored label looks like.
"""
import math
from typing import Annotated, Any, TypeAlias
from pydantic import BeforeValidator

Number: TypeAlias = int | float


def coerce_number(value: Any) -> Number | None:
    """
    Read ``value`` as a number.

    Returns:
        The number, or None when ``value`` has no numeric reading (None, NaN, non-numeric text, containers).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        if text == '':
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def number_or(value: Any, default: Number) -> Number:
    """``value`` as a number, or ``default`` when it reads as zero or not at all."""
    number = coerce_number(value)
    return number if number else default


def is_number(value: Any) -> bool:
    """True for actual numeric values (not booleans, not numeric strings, not NaN)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


LenientNumber: TypeAlias = Annotated[Number | None, BeforeValidator(coerce_number)]
"""Model field type reading any value through :func:`coerce_number` (None when unreadable)."""
