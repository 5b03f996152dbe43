"""Tests for KeyedMap."""

from dataclasses import dataclass
from enum import Enum

import pytest

from json_core import KeyedMap, OrderedList


class Level(Enum):
    LOW = 1
    HIGH = 2


@pytest.fixture
def sample():
    return KeyedMap.parse(
        '{"n": 1, "pi": 3.14, "s": "42", "word": "abc", "blank": "",'
        ' "nil": null, "flag": true, "list": [1, 2], "obj": {"k": "v"},'
        ' "level": "high"}'
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_from_mapping():
    m = KeyedMap({"a": 1, "b": 2})
    assert list(m) == ["a", "b"]


def test_from_keyed_map_copies_top_level():
    source = KeyedMap({"a": 1})
    m = KeyedMap(source)
    m.put("b", 2)
    assert not source.has("b")


def test_of():
    m = KeyedMap.of(("x", 1), ("y", None))
    assert m == {"x": 1, "y": None}


def test_non_string_key_rejected():
    with pytest.raises(TypeError):
        KeyedMap().put(1, "a")
    with pytest.raises(TypeError):
        KeyedMap({1: "a"})


def test_parse_malformed_gives_empty_map():
    assert KeyedMap.parse('{"a": ') == {}


def test_parse_array_text_gives_empty_map():
    assert KeyedMap.parse("[1, 2]") == {}


def test_from_object_dataclass():
    @dataclass
    class User:
        name: str
        tags: list

    m = KeyedMap.from_object(User("joe", ["a", "b"]))
    assert m.get_string("name") == "joe"
    assert isinstance(m.get("tags"), OrderedList)
    assert m.get_list("tags").join("|") == "a|b"


def test_from_object_text():
    assert KeyedMap.from_object('{"a": 1}') == {"a": 1}


# ---------------------------------------------------------------------------
# Raw access
# ---------------------------------------------------------------------------

def test_get_absent_is_none(sample):
    assert sample.get("missing") is None


def test_get_with_fallback(sample):
    assert sample.get("missing", "fb") == "fb"
    assert sample.get("blank", "fb") == "fb"
    assert sample.get("nil", "fb") == "fb"
    assert sample.get("n", "fb") == 1


def test_getitem(sample):
    assert sample["word"] == "abc"
    with pytest.raises(KeyError):
        sample["missing"]


def test_get_as(sample):
    assert sample.get_as(str, "word") == "abc"
    assert sample.get_as(str, "n", "x") == "x"
    assert sample.get_as(KeyedMap, "obj") == {"k": "v"}


def test_get_enum(sample):
    assert sample.get_enum(Level, "level") is Level.HIGH
    assert sample.get_enum(Level, "word", Level.LOW) is Level.LOW
    assert sample.get_enum(Level, "missing", Level.LOW) is Level.LOW


# ---------------------------------------------------------------------------
# Typed getters
# ---------------------------------------------------------------------------

def test_get_bool(sample):
    assert sample.get_bool("flag") is True
    assert sample.get_bool("missing") is False
    assert sample.get_bool("missing", True) is True


def test_get_bool_string_true_is_false():
    m = KeyedMap.of(("b", "true"))
    assert m.get_bool("b", True) is False


def test_get_int(sample):
    assert sample.get_int("s", 0) == 42
    assert sample.get_int("word", 5) == 5
    assert sample.get_int("missing", 5) == 5
    assert sample.get_int("pi") == 3
    assert sample.get_int("blank", 5) == 5


def test_get_long_double_float(sample):
    assert sample.get_long("s") == 42
    assert sample.get_double("pi") == 3.14
    assert sample.get_float("pi") == pytest.approx(3.14, rel=1e-6)
    assert sample.get_double("word", 2.5) == 2.5


def test_get_string(sample):
    assert sample.get_string("n") == "1"
    assert sample.get_string("missing") == ""
    assert sample.get_string("nil", "none") == "none"
    assert sample.get_string("obj") == '{"k":"v"}'


def test_get_list_and_map(sample):
    assert sample.get_list("list") == [1, 2]
    assert sample.get_list("word") == []
    assert sample.get_map("obj").get_string("k") == "v"
    assert sample.get_map("list") == {}
    fallback = KeyedMap.of(("z", 0))
    assert sample.get_map("missing", fallback) is fallback


def test_nested_mutation_is_visible(sample):
    sample.get_map("obj").put("extra", 1)
    sample.get_list("list").append(3)
    assert sample.get_map("obj").get_int("extra") == 1
    assert sample.get_list("list") == [1, 2, 3]


def test_get_map_wraps_plain_dict():
    m = KeyedMap.of(("d", {"a": 1}))
    assert m.get_map("d").get_int("a") == 1


# ---------------------------------------------------------------------------
# Mutation helpers
# ---------------------------------------------------------------------------

def test_has_after_put_none():
    m = KeyedMap()
    m.put("k", None)
    assert m.has("k")
    assert "k" in m
    assert m.get("k") is None


def test_put_returns_previous():
    m = KeyedMap()
    assert m.put("a", 1) is None
    assert m.put("a", 2) == 1
    assert m.get("a") == 2


def test_reassign_keeps_position():
    m = KeyedMap.of(("a", 1), ("b", 2))
    m.put("a", 3)
    assert m.keys() == ["a", "b"]
    assert m.serialize() == '{"a":3,"b":2}'


def test_put_if_absent():
    m = KeyedMap.of(("a", 1), ("n", None))
    assert m.put_if_absent("a", 9) == 1
    assert m.get("a") == 1
    assert m.put_if_absent("b", 2) is None
    assert m.get("b") == 2
    assert m.put_if_absent("n", 3) is None
    assert m.get("n") == 3


def test_put_opt():
    m = KeyedMap.of(("a", 1))
    assert m.put_opt("a", 9) == 1
    assert m.get("a") == 1
    assert m.put_opt("b", None) is None
    assert not m.has("b")
    assert m.put_opt("c", 3) is None
    assert m.get("c") == 3


def test_remove_key():
    m = KeyedMap.of(("a", 1))
    assert m.remove_key("a") == 1
    assert m.remove_key("a") is None
    assert len(m) == 0


def test_keys_and_values():
    m = KeyedMap.of(("b", 1), ("a", [2]))
    assert isinstance(m.keys(), OrderedList)
    assert m.keys() == ["b", "a"]
    assert m.values() == [1, [2]]
    assert list(m.items()) == [("b", 1), ("a", [2])]


def test_increment():
    m = KeyedMap.of(("i", 1), ("f", 3.14), ("s", "x"))
    m.increment("i")
    m.increment("f")
    m.increment("s")
    m.increment("missing")
    assert m.get("i") == 2
    assert isinstance(m.get("i"), int)
    assert m.get("f") == pytest.approx(4.14)
    assert m.get("s") == "x"
    assert not m.has("missing")


def test_increment_huge_float_still_serializes():
    m = KeyedMap.parse('{"x": 1e300}')
    m.increment("x")
    assert isinstance(m.get("x"), float)
    assert KeyedMap.parse(m.serialize()).get_double("x") == 1e300


def test_increment_wraps_long_max():
    m = KeyedMap.parse('{"n": 9223372036854775807}')
    m.increment("n")
    assert m.get_long("n") == -(2**63)
    assert m.serialize() == '{"n":-9223372036854775808}'


def test_increment_integral_float():
    m = KeyedMap.of(("f", 3.0))
    m.increment("f")
    assert m.get("f") == 4
    assert isinstance(m.get("f"), int)


def test_get_enum_on_stored_member():
    m = KeyedMap.of(("level", Level.HIGH))
    assert m.get_enum(Level, "level") is Level.HIGH
    assert m.get_string("level") == "HIGH"


def test_item_protocol():
    m = KeyedMap()
    m["a"] = 1
    del m["a"]
    assert len(m) == 0
    with pytest.raises(KeyError):
        del m["a"]


# ---------------------------------------------------------------------------
# Serialization / copies
# ---------------------------------------------------------------------------

def test_copy_shares_nested_values():
    m = KeyedMap.parse('{"list": [1]}')
    clone = m.copy()
    clone.get_list("list").append(2)
    clone.put("other", True)
    assert m.get_list("list") == [1, 2]
    assert not m.has("other")


def test_deep_copy_shares_nothing():
    m = KeyedMap.parse('{"list": [1], "obj": {"a": 1}}')
    clone = m.deep_copy()
    assert clone == m
    clone.get_list("list").append(2)
    clone.get_map("obj").increment("a")
    assert m.serialize() == '{"list":[1],"obj":{"a":1}}'


def test_repr():
    assert repr(KeyedMap.of(("a", 1))) == "KeyedMap({'a': 1})"
