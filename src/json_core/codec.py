"""JSON codec: text <-> plain Python values, backed by orjson."""

from __future__ import annotations

import os
from dataclasses import dataclass
from logging import getLogger
from typing import Any, Protocol, TypeVar, runtime_checkable

import orjson

from .errors import DecodeFailure
from .values import is_number

logger = getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}

T = TypeVar("T")


@runtime_checkable
class JSONSerializable(Protocol):
    """Anything that can hand the codec a plain list or dict of itself."""

    def to_builtin(self) -> list | dict: ...


def _default(obj: Any) -> Any:
    # orjson calls this for every type it does not know natively
    if isinstance(obj, JSONSerializable):
        return obj.to_builtin()
    if isinstance(obj, (tuple, set, frozenset)):
        return list(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _env_flag(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class JSONCodec:
    """Parse/serialize settings shared by every container operation.

    ``show_errors`` raises the text of undecodable input from DEBUG to INFO.
    ``indent`` pretty-prints serialized output with two spaces.
    """

    show_errors: bool = False
    indent: bool = False

    @classmethod
    def from_env(cls) -> "JSONCodec":
        """Build a codec from ``JSON_CORE_SHOW_ERRORS`` / ``JSON_CORE_INDENT``."""
        return cls(
            show_errors=_env_flag("JSON_CORE_SHOW_ERRORS", False),
            indent=_env_flag("JSON_CORE_INDENT", False),
        )

    # -- Serialization --------------------------------------------------

    @property
    def options(self) -> int:
        option = orjson.OPT_NON_STR_KEYS
        if self.indent:
            option |= orjson.OPT_INDENT_2
        return option

    def serialize(self, value: Any) -> str:
        """Return the JSON text of *value*.

        Strings are returned unchanged: they are taken to be JSON already.
        """
        if isinstance(value, str):
            return value
        return orjson.dumps(value, default=_default, option=self.options).decode("utf-8")

    # -- Parsing ----------------------------------------------------------

    def parse(self, text: str | bytes) -> Any:
        """Decode *text*, raising :class:`DecodeFailure` on malformed input."""
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as exc:
            raise DecodeFailure(str(exc), text) from exc

    def parse_as(self, text: str | bytes, kind: type) -> Any:
        """Decode *text* into a value of *kind* (``dict`` or ``list``).

        Failures are absorbed: the diagnostic is logged and ``kind()`` is
        returned.
        """
        try:
            value = self.parse(text)
            if not isinstance(value, kind):
                raise DecodeFailure(
                    f"expected a JSON {_KIND_NAMES.get(kind, kind.__name__)}, "
                    f"got {type(value).__name__}",
                    text,
                )
        except DecodeFailure as exc:
            self._report(exc)
            return kind()
        return value

    def from_json(self, text: str | bytes, cls: type[T]) -> T | None:
        """Decode *text* into an instance of *cls*.

        JSON values that already are a *cls* (or a number for ``float``) are
        returned as is; a JSON object is passed as keyword arguments to
        *cls*, which covers dataclasses. A JSON null gives ``None``. Failures
        are logged like :meth:`parse_as` and also give ``None``.
        """
        try:
            return _build(cls, self.parse(text), text)
        except DecodeFailure as exc:
            self._report(exc)
            return None

    def _report(self, exc: DecodeFailure) -> None:
        logger.debug(str(exc), exc_info=exc)
        if self.show_errors:
            logger.info(exc.text)
        else:
            logger.debug(exc.text)


_KIND_NAMES = {dict: "object", list: "array"}

DEFAULT_CODEC = JSONCodec()


def _build(cls: type[T], value: Any, text: str | bytes) -> T | None:
    if value is None:
        return None
    if isinstance(value, bool) and cls in (int, float):
        raise DecodeFailure(f"expected {cls.__name__}, got bool", text)
    if isinstance(value, cls):
        return value
    if cls is float and is_number(value):
        return float(value)
    if isinstance(value, dict):
        try:
            return cls(**value)
        except (TypeError, ValueError) as exc:
            raise DecodeFailure(f"cannot build {cls.__name__}: {exc}", text) from exc
    raise DecodeFailure(
        f"expected {cls.__name__}, got {type(value).__name__}", text
    )
