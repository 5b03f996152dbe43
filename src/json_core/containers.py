"""OrderedList and KeyedMap: JSON containers with typed, fallback-aware getters."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Mapping, TypeVar

from .codec import DEFAULT_CODEC, JSONCodec
from .coercion import (
    as_bool,
    as_double,
    as_enum,
    as_float,
    as_int,
    as_long,
    incremented,
    to_text,
)
from .errors import IndexOutOfRange
from .values import MISSING, DynamicValue, is_blank

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


# ---------------------------------------------------------------------------
# Shared typed-get family
# ---------------------------------------------------------------------------

class TypedContainer:
    """Typed getters shared by both containers.

    Subclasses provide ``_lookup`` (stored value or ``MISSING``) and
    ``_store``; every getter here is built on those two and never raises.
    """

    __slots__ = ()

    def _lookup(self, key: Any) -> Any:
        raise NotImplementedError

    def _store(self, key: Any, value: DynamicValue) -> None:
        raise NotImplementedError

    def _get_or(self, key: Any, fallback: Any) -> Any:
        value = self._lookup(key)
        return fallback if is_blank(value) else value

    def _get_converted(self, key: Any, fallback: T, convert: Callable[[Any], T | None]) -> T:
        value = self._lookup(key)
        if is_blank(value):
            return fallback
        converted = convert(value)
        return fallback if converted is None else converted

    # -- Typed getters ----------------------------------------------------

    def get_as(self, cls: type[T], key: Any, fallback: T | None = None) -> T | None:
        """Return the stored value if it is an instance of *cls*."""
        value = self._lookup(key)
        if value is MISSING or not isinstance(value, cls):
            return fallback
        return value

    def get_enum(self, enum_cls: type[E], key: Any, fallback: E | None = None) -> E | None:
        """Match the value's string form against *enum_cls* member names, ignoring case."""
        member = as_enum(enum_cls, self._get_or(key, ""))
        return fallback if member is None else member

    def get_bool(self, key: Any, fallback: bool = False) -> bool:
        """Return a stored boolean.

        Absent or blank values give *fallback*; any other non-boolean value
        gives ``False`` whatever *fallback* is.
        """
        value = self._lookup(key)
        if is_blank(value):
            return fallback
        result = as_bool(value)
        return False if result is None else result

    def get_int(self, key: Any, fallback: int = 0) -> int:
        return self._get_converted(key, fallback, as_int)

    def get_long(self, key: Any, fallback: int = 0) -> int:
        return self._get_converted(key, fallback, as_long)

    def get_float(self, key: Any, fallback: float = 0.0) -> float:
        return self._get_converted(key, fallback, as_float)

    def get_double(self, key: Any, fallback: float = 0.0) -> float:
        return self._get_converted(key, fallback, as_double)

    def get_string(self, key: Any, fallback: str | None = "") -> str:
        return to_text(self._get_or(key, fallback))

    def get_list(self, key: Any, fallback: OrderedList | None = None) -> OrderedList:
        """Return a nested list, wrapping a plain ``list``/``tuple`` if needed."""
        value = self._lookup(key)
        if isinstance(value, OrderedList):
            return value
        if isinstance(value, (list, tuple)):
            return OrderedList(value)
        return OrderedList() if fallback is None else fallback

    def get_map(self, key: Any, fallback: KeyedMap | None = None) -> KeyedMap:
        """Return a nested map, wrapping a plain ``dict`` with ``str`` keys if needed."""
        value = self._lookup(key)
        if isinstance(value, KeyedMap):
            return value
        if isinstance(value, dict) and all(isinstance(k, str) for k in value):
            return KeyedMap(value)
        return KeyedMap() if fallback is None else fallback

    # -- Mutation helpers -------------------------------------------------

    def increment(self, key: Any) -> None:
        """Add one to a numeric value in place; anything else is left alone."""
        value = incremented(self._lookup(key))
        if value is not None:
            self._store(key, value)

    # -- Serialization / copies ---------------------------------------------

    def to_builtin(self) -> list | dict:
        raise NotImplementedError

    def serialize(self, codec: JSONCodec | None = None) -> str:
        return (codec or DEFAULT_CODEC).serialize(self)

    def copy(self):
        """Shallow copy: a new container holding the same element objects."""
        return type(self)(self.to_builtin())

    def deep_copy(self, codec: JSONCodec | None = None):
        """Independent copy made by serializing and parsing again."""
        return type(self).parse(self.serialize(codec), codec)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_builtin()!r})"

    __hash__ = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# OrderedList
# ---------------------------------------------------------------------------

class OrderedList(TypedContainer):
    """Insertion-ordered, index-addressable JSON array.

    Typed getters take a 0-based index; out-of-range indices give the
    fallback. Only :meth:`get` without a fallback raises.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[DynamicValue] | None = None) -> None:
        self._items: list[DynamicValue] = list(items) if items is not None else []

    @classmethod
    def of(cls, *items: DynamicValue) -> OrderedList:
        return cls(items)

    @classmethod
    def parse(cls, text: str | bytes, codec: JSONCodec | None = None) -> OrderedList:
        """Decode a JSON array; malformed input gives an empty list."""
        decoded = (codec or DEFAULT_CODEC).parse_as(text, list)
        return cls(wrap(item) for item in decoded)

    @classmethod
    def from_object(cls, obj: Any, codec: JSONCodec | None = None) -> OrderedList:
        """Convert any serializable host value by round-tripping through JSON."""
        codec = codec or DEFAULT_CODEC
        return cls.parse(codec.serialize(obj), codec)

    def _lookup(self, key: Any) -> Any:
        if isinstance(key, int) and 0 <= key < len(self._items):
            return self._items[key]
        return MISSING

    def _store(self, key: Any, value: DynamicValue) -> None:
        self._items[key] = value

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            raise IndexOutOfRange(index, len(self._items))

    # -- Raw access -------------------------------------------------------

    def get(self, index: int, fallback: Any = MISSING) -> DynamicValue:
        """Return the element at *index*.

        Without *fallback*, an out-of-range index raises
        :class:`IndexOutOfRange`. With it, the fallback replaces an
        out-of-range index, ``None`` and ``""``.
        """
        if fallback is MISSING:
            self._check_index(index)
            return self._items[index]
        return self._get_or(index, fallback)

    def set(self, index: int, value: DynamicValue) -> DynamicValue:
        self._check_index(index)
        previous = self._items[index]
        self._items[index] = value
        return previous

    def append(self, value: DynamicValue) -> None:
        self._items.append(value)

    def extend(self, values: Iterable[DynamicValue]) -> None:
        self._items.extend(values)

    def insert(self, index: int, value: DynamicValue) -> None:
        self._items.insert(index, value)

    def clear(self) -> None:
        self._items.clear()

    # -- Helpers ----------------------------------------------------------

    def join(self, separator: str) -> str:
        return separator.join(to_text(item) for item in self._items)

    def remove_at(self, index: int) -> DynamicValue:
        """Remove and return an element, wrapping *index* around the size.

        ``-1`` removes the last element and ``len + k`` removes index ``k``.
        """
        if not self._items:
            raise IndexOutOfRange(index, 0)
        return self._items.pop(index % len(self._items))

    def remove_value(self, value: DynamicValue) -> bool:
        """Remove the first element equal to *value*."""
        try:
            self._items.remove(value)
        except ValueError:
            return False
        return True

    def to_keyed_map(self, keys: OrderedList | Iterable[Any]) -> KeyedMap:
        """Pair each key's string form with the value at the same position.

        Keys past the end of this list have no value and are skipped.
        """
        if not isinstance(keys, OrderedList):
            keys = OrderedList(keys)
        out = KeyedMap()
        for i in range(min(len(keys), len(self._items))):
            out.put(keys.get_string(i), self._items[i])
        return out

    def to_builtin(self) -> list:
        return list(self._items)

    # -- Container protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DynamicValue]:
        return iter(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __getitem__(self, index: int) -> DynamicValue:
        return self.get(index)

    def __setitem__(self, index: int, value: DynamicValue) -> None:
        self.set(index, value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OrderedList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented


# ---------------------------------------------------------------------------
# KeyedMap
# ---------------------------------------------------------------------------

class KeyedMap(TypedContainer):
    """Insertion-ordered JSON object with string keys.

    Re-assigning a key keeps its original position. Typed getters give the
    fallback for absent keys; nothing here raises on a missing key except
    ``map[key]``.
    """

    __slots__ = ("_entries",)

    def __init__(
        self,
        mapping: Mapping[str, DynamicValue] | Iterable[tuple[str, DynamicValue]] | None = None,
    ) -> None:
        self._entries: dict[str, DynamicValue] = {}
        if isinstance(mapping, KeyedMap):
            mapping = mapping._entries
        if mapping is not None:
            for key, value in dict(mapping).items():
                self.put(key, value)

    @classmethod
    def of(cls, *entries: tuple[str, DynamicValue]) -> KeyedMap:
        return cls(entries)

    @classmethod
    def parse(cls, text: str | bytes, codec: JSONCodec | None = None) -> KeyedMap:
        """Decode a JSON object; malformed input gives an empty map."""
        decoded = (codec or DEFAULT_CODEC).parse_as(text, dict)
        return cls((key, wrap(value)) for key, value in decoded.items())

    @classmethod
    def from_object(cls, obj: Any, codec: JSONCodec | None = None) -> KeyedMap:
        """Convert any serializable host value by round-tripping through JSON."""
        codec = codec or DEFAULT_CODEC
        return cls.parse(codec.serialize(obj), codec)

    def _lookup(self, key: Any) -> Any:
        return self._entries.get(key, MISSING)

    def _store(self, key: Any, value: DynamicValue) -> None:
        self._entries[key] = value

    # -- Raw access -------------------------------------------------------

    def get(self, key: str, fallback: Any = MISSING) -> DynamicValue:
        """Return the value under *key*; ``None`` (or *fallback*) if absent.

        With *fallback*, stored ``None`` and ``""`` are replaced as well.
        """
        if fallback is MISSING:
            return self._entries.get(key)
        return self._get_or(key, fallback)

    def has(self, key: str) -> bool:
        return key in self._entries

    def put(self, key: str, value: DynamicValue) -> DynamicValue:
        """Store *value* and return the previous value, if any."""
        if not isinstance(key, str):
            raise TypeError(f"keys must be str, not {type(key).__name__}")
        previous = self._entries.get(key)
        self._entries[key] = value
        return previous

    def put_if_absent(self, key: str, value: DynamicValue) -> DynamicValue:
        """Store *value* only when *key* is missing or holds ``None``."""
        current = self._entries.get(key)
        if current is None:
            self.put(key, value)
        return current

    def put_opt(self, key: str, value: DynamicValue) -> DynamicValue:
        """Store a non-null *value* only when *key* holds nothing yet."""
        current = self._entries.get(key)
        if current is None and value is not None:
            return self.put(key, value)
        return current

    def remove_key(self, key: str) -> DynamicValue:
        return self._entries.pop(key, None)

    def keys(self) -> OrderedList:
        return OrderedList(self._entries)

    def values(self) -> OrderedList:
        return OrderedList(self._entries.values())

    def items(self) -> Iterator[tuple[str, DynamicValue]]:
        return iter(self._entries.items())

    def to_builtin(self) -> dict:
        return dict(self._entries)

    # -- Container protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> DynamicValue:
        return self._entries[key]

    def __setitem__(self, key: str, value: DynamicValue) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyedMap):
            return self._entries == other._entries
        if isinstance(other, dict):
            return self._entries == other
        return NotImplemented


# ---------------------------------------------------------------------------
# Tree wrapping
# ---------------------------------------------------------------------------

def wrap(value: Any) -> DynamicValue:
    """Turn decoded ``dict``/``list`` trees into KeyedMap/OrderedList trees."""
    if isinstance(value, dict):
        return KeyedMap((key, wrap(item)) for key, item in value.items())
    if isinstance(value, list):
        return OrderedList(wrap(item) for item in value)
    return value
