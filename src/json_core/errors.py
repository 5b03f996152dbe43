"""Exception types for json_core."""

from __future__ import annotations


class JSONCoreError(Exception):
    """Base class for every error raised by json_core."""


class IndexOutOfRange(JSONCoreError, IndexError):
    """Raw positional access outside the bounds of an OrderedList."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"index {index} out of range for list of size {size}")


class DecodeFailure(JSONCoreError, ValueError):
    """Text could not be decoded into the requested JSON shape."""

    def __init__(self, message: str, text: str | bytes) -> None:
        self.text = text
        super().__init__(message)
