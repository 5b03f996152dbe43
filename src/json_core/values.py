"""Value types for json_core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .containers import KeyedMap, OrderedList


class _Missing:
    """Singleton for a slot that holds no value at all.

    Distinct from ``None``, which is a stored JSON null.
    """

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

Scalar = Union[None, bool, int, float, str]

# Plain list/dict/tuple values may be stored by callers and are wrapped on
# demand; ``Any`` covers host objects awaiting conversion.
DynamicValue = Union[Scalar, "OrderedList", "KeyedMap", list, dict, tuple, Any]


def is_number(value: object) -> bool:
    """True for ``int`` and ``float`` values; ``bool`` is not a number."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value: object) -> bool:
    """True when *value* counts as absent for fallback purposes."""
    return value is MISSING or value is None or (isinstance(value, str) and not value)
