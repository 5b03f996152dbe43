"""Coercion helpers shared by every typed getter.

Each ``as_*`` function views a stored value as the requested type and
returns ``None`` when it cannot; none of them raise. Fallback handling
lives with the containers, which call these after the absent/blank check.
"""

from __future__ import annotations

import math
import re
import struct
from enum import Enum
from typing import Any, TypeVar

from .codec import DEFAULT_CODEC, JSONCodec, JSONSerializable
from .values import is_number

E = TypeVar("E", bound=Enum)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(NaN|Infinity|([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)"
)

INT_BITS = 32
LONG_BITS = 64


# ---------------------------------------------------------------------------
# String form
# ---------------------------------------------------------------------------

def to_text(value: Any, codec: JSONCodec | None = None) -> str:
    """Return the native string form of a stored value.

    - ``None`` → ``"null"``, booleans → ``"true"`` / ``"false"``
    - enum members → their name
    - containers, lists and dicts → their JSON text
    - everything else → ``str(value)``
    """
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, dict, JSONSerializable)):
        return (codec or DEFAULT_CODEC).serialize(value)
    return str(value)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def as_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def as_int(value: Any) -> int | None:
    """View *value* as a signed 32-bit integer."""
    return _as_integer(value, INT_BITS)


def as_long(value: Any) -> int | None:
    """View *value* as a signed 64-bit integer."""
    return _as_integer(value, LONG_BITS)


def as_double(value: Any) -> float | None:
    if is_number(value):
        try:
            return float(value)
        except OverflowError:
            return math.copysign(math.inf, value)
    if isinstance(value, str) and _FLOAT_RE.fullmatch(value.strip()):
        return float(value)
    return None


def as_float(value: Any) -> float | None:
    """View *value* as an IEEE single-precision float."""
    double = as_double(value)
    if double is None:
        return None
    return _to_single(double)


def as_enum(enum_cls: type[E], value: Any) -> E | None:
    """Find the member of *enum_cls* whose name matches *value*, ignoring case."""
    if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
        return None
    text = to_text(value).casefold()
    for member in enum_cls:
        if member.name.casefold() == text:
            return member
    return None


def incremented(value: Any) -> int | float | None:
    """Return *value* + 1, integral when *value* holds a 64-bit integral value.

    Integers wrap at 64 bits; floats outside that range stay floats.
    """
    if not is_number(value):
        return None
    if isinstance(value, int):
        return _wrap(value + 1, LONG_BITS)
    if _truncate(value, LONG_BITS) == value:
        return int(value) + 1
    return value + 1.0


# ---------------------------------------------------------------------------
# Width handling
# ---------------------------------------------------------------------------

def _bounds(bits: int) -> tuple[int, int]:
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _as_integer(value: Any, bits: int) -> int | None:
    if isinstance(value, float):
        return _truncate(value, bits)
    if is_number(value):
        return _wrap(value, bits)
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        parsed = int(value)
        low, high = _bounds(bits)
        if low <= parsed <= high:
            return parsed
    return None


def _wrap(value: int, bits: int) -> int:
    """Two's-complement narrowing of an integer."""
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _truncate(value: float, bits: int) -> int:
    """Truncate toward zero, saturating at the bounds; NaN becomes 0."""
    if math.isnan(value):
        return 0
    low, high = _bounds(bits)
    if math.isinf(value):
        return high if value > 0 else low
    return max(low, min(high, int(value)))


def _to_single(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)
