"""Tests for tabproj.jsontypes: JSON type sets."""

from __future__ import annotations

import pytest

from tabproj.jsontypes import JsonType


class TestFromName:
    def test_number_covers_integer(self):
        assert JsonType.INTEGER in JsonType.from_name("number")

    def test_any(self):
        assert JsonType.from_name("any") == JsonType.ANY

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="unknown JSON type"):
            JsonType.from_name("decimal")


class TestOfValue:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, JsonType.NULL),
            (True, JsonType.BOOLEAN),
            (3, JsonType.INTEGER),
            (3.0, JsonType.INTEGER),
            (3.5, JsonType.FRACTIONAL),
            ("x", JsonType.STRING),
            ([1], JsonType.ARRAY),
            ({"a": 1}, JsonType.OBJECT),
        ],
    )
    def test_value_types(self, value, expected):
        assert JsonType.of_value(value) == expected


class TestNames:
    def test_single(self):
        assert JsonType.INTEGER.names() == ["integer"]

    def test_number_replaces_integer(self):
        assert (JsonType.NUMBER | JsonType.NULL).names() == ["null", "number"]

    def test_any(self):
        assert JsonType.ANY.names() == ["array", "boolean", "null", "number", "object", "string"]

    def test_none(self):
        assert JsonType.NONE.names() == []
