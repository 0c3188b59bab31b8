"""Tests for type expressions: parse_type and TypeRef rendering."""
from __future__ import annotations

import pytest

from plantuml_transpiler.parser import parse_type
from plantuml_transpiler.types import TypeRef


class TestParseType:
    def test_simple_type(self):
        assert parse_type("int") == TypeRef("int")
        assert parse_type("  String ") == TypeRef("String")

    def test_generic_type(self):
        assert parse_type("List<User>") == TypeRef("List", (TypeRef("User"),))

    def test_nested_generic_type(self):
        t = parse_type("Map<String, List<Integer>>")
        assert t.name == "Map"
        assert t.args == (TypeRef("String"), TypeRef("List", (TypeRef("Integer"),)))
        assert t.is_generic

    @pytest.mark.parametrize("text", ["List<", "Map<String, >", "<T>", "List<<T>"])
    def test_malformed_generics_stay_simple(self, text):
        t = parse_type(text)
        assert t == TypeRef(text.strip())
        assert not t.is_generic

    def test_array_suffix_is_kept(self):
        assert parse_type("int[]") == TypeRef("int[]")


class TestTypeRefRendering:
    @pytest.mark.parametrize(
        "text",
        ["int", "List<User>", "Map<String, List<Integer>>", "Pair<A, Map<B, C>>"],
    )
    def test_str_reproduces_normalized_text(self, text):
        assert str(parse_type(text)) == text

    def test_spacing_is_normalized(self):
        assert str(parse_type("Map<String,Integer>")) == "Map<String, Integer>"
