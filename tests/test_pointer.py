"""Tests for tabproj.pointer: RFC 6901 pointer parsing and rendering."""

from __future__ import annotations

import pytest

from tabproj.pointer import NEXT_INDEX, Pointer, parse_token, render_token


class TestParse:
    def test_root(self):
        assert Pointer.from_str("") == Pointer()
        assert Pointer.from_str("").is_root

    def test_properties(self):
        assert Pointer.from_str("/foo/bar").tokens == ("foo", "bar")

    def test_index_and_next_index(self):
        assert Pointer.from_str("/items/3/-").tokens == ("items", 3, NEXT_INDEX)

    def test_leading_zero_is_property(self):
        assert Pointer.from_str("/a/01").tokens == ("a", "01")
        assert Pointer.from_str("/a/0").tokens == ("a", 0)

    def test_escapes(self):
        assert Pointer.from_str("/a~1b/c~0d/~01").tokens == ("a/b", "c~d", "~1")

    def test_empty_property(self):
        assert Pointer.from_str("/").tokens == ("",)

    def test_missing_leading_slash_rejected(self):
        with pytest.raises(ValueError, match="must be empty or start with '/'"):
            Pointer.from_str("foo/bar")


class TestRender:
    @pytest.mark.parametrize("text", ["", "/foo", "/foo/0/-", "/a~1b/c~0d", "/"])
    def test_canonical_form_is_preserved(self, text):
        assert str(Pointer.from_str(text)) == text

    def test_child(self):
        ptr = Pointer().child("bee").child(2).child(NEXT_INDEX)
        assert str(ptr) == "/bee/2/-"
        assert len(ptr) == 3

    def test_tokens(self):
        assert parse_token("-") is NEXT_INDEX
        assert parse_token("12") == 12
        assert render_token(NEXT_INDEX) == "-"
        assert render_token(7) == "7"
        assert render_token("a/b") == "a/b"


class TestOrdering:
    def test_equality_and_hash(self):
        assert Pointer.from_str("/a/1") == Pointer(("a", 1))
        assert len({Pointer.from_str("/a"), Pointer(("a",))}) == 1

    def test_index_differs_from_property(self):
        assert Pointer(("a", 1)) != Pointer(("a", "1"))

    def test_sorting_is_structural(self):
        ptrs = [
            Pointer.from_str("/b"),
            Pointer.from_str("/a/x"),
            Pointer.from_str("/a"),
            Pointer.from_str(""),
            Pointer.from_str("/a/-"),
            Pointer.from_str("/a/10"),
            Pointer.from_str("/a/2"),
        ]
        assert [str(p) for p in sorted(ptrs)] == ["", "/a", "/a/2", "/a/10", "/a/-", "/a/x", "/b"]
