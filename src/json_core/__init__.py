"""json_core — JSON containers with typed getters and fallback defaults.

The containers are plain in-memory structures without locking; callers
sharing one across threads must serialize access themselves.
"""

from .codec import DEFAULT_CODEC, JSONCodec
from .containers import KeyedMap, OrderedList, TypedContainer
from .errors import DecodeFailure, IndexOutOfRange, JSONCoreError
from .values import MISSING, DynamicValue

__all__ = [
    "OrderedList",
    "KeyedMap",
    "TypedContainer",
    "JSONCodec",
    "DEFAULT_CODEC",
    "DynamicValue",
    "MISSING",
    "JSONCoreError",
    "IndexOutOfRange",
    "DecodeFailure",
]
