"""Tests for the generator framework: traversal, lookups and helpers."""
from __future__ import annotations

import pytest

from plantuml_transpiler.generators.base import (
    default_kind,
    extract_base_generic_type,
    find_associations,
    find_entity,
    find_extended_interfaces,
    find_implemented_interfaces,
    find_parent_class,
    generate,
    indent,
    is_complex_generic_type,
    package_of,
    resolve_options,
)
from plantuml_transpiler.parser import parse_plantuml
from plantuml_transpiler.types import GeneratorOptions, TypeRef


class RecordingGenerator:
    """Emits one marker per hook call."""

    def __init__(self, packages: bool = True) -> None:
        self.indent_size = 4
        self.packages = packages

    def supports_packages(self):
        return self.packages

    def generate_header(self, diagram):
        return "H|"

    def generate_footer(self, diagram):
        return "F"

    def generate_package_start(self, name):
        return f"P:{name}|"

    def generate_package_end(self, name):
        return f"/P:{name}|"

    def generate_class(self, cls, diagram):
        return f"C:{cls.name}|"

    def generate_interface(self, iface, diagram):
        return f"I:{iface.name}|"

    def generate_enum(self, enum, diagram):
        return f"E:{enum.name}|"


DIAGRAM = """\
class Z
interface I1
package p {
  enum E1 {
    A
  }
  class A
}
class B
"""


# ============================================================================
# Traversal
# ============================================================================


class TestTraversal:
    def test_packages_then_unpackaged_grouped_by_kind(self):
        d = parse_plantuml(DIAGRAM)
        out = generate(d, RecordingGenerator())
        assert out == "H|P:p|E:E1|C:A|/P:p|C:Z|C:B|I:I1|F"

    def test_without_package_support(self):
        d = parse_plantuml(DIAGRAM)
        out = generate(d, RecordingGenerator(packages=False))
        assert out == "H|C:Z|C:A|C:B|I:I1|E:E1|F"

    def test_orphan_package_member_is_skipped(self):
        d = parse_plantuml(DIAGRAM)
        d.packages["p"].append("Ghost")
        d.packages["empty"] = ["Nobody"]
        out = generate(d, RecordingGenerator())
        assert out == "H|P:p|E:E1|C:A|/P:p|P:empty|/P:empty|C:Z|C:B|I:I1|F"

    def test_empty_diagram(self):
        assert generate(parse_plantuml(""), RecordingGenerator()) == "H|F"

    def test_order_by_inheritance_reorders_unpackaged_group(self):
        d = parse_plantuml("class Dog\nclass Impl\ninterface Api\nDog <|-- Impl\nImpl <|.. Api")
        assert generate(d, RecordingGenerator()) == "H|C:Dog|C:Impl|I:Api|F"
        ordered = generate(d, RecordingGenerator(), {"orderByInheritance": True})
        assert ordered == "H|I:Api|C:Impl|C:Dog|F"

    def test_order_by_inheritance_within_package(self):
        d = parse_plantuml("package p {\n  class Child\n  class Base\n}\nChild <|-- Base")
        out = generate(d, RecordingGenerator(), GeneratorOptions(order_by_inheritance=True))
        assert out == "H|P:p|C:Base|C:Child|/P:p|F"


class TestResolveOptions:
    def test_none_gives_defaults(self):
        assert resolve_options(None) == GeneratorOptions()

    def test_instance_is_returned_as_is(self):
        opts = GeneratorOptions(indent_size=3)
        assert resolve_options(opts) is opts

    @pytest.mark.parametrize(
        "raw",
        [
            {"indent_size": 8, "order_by_inheritance": True},
            {"indentSize": 8, "orderByInheritance": True},
        ],
    )
    def test_dict_keys_in_both_cases(self, raw):
        assert resolve_options(raw) == GeneratorOptions(indent_size=8, order_by_inheritance=True)


# ============================================================================
# Lookups
# ============================================================================


LOOKUP_DIAGRAM = """\
class Dog
class Animal
class Pet
interface Named
interface Walker
interface Runner
Dog <|-- Animal
Dog <|-- Pet
Dog <|.. Named
Dog <|.. Missing
Dog <|.. Named
Runner <|-- Walker
Dog --> Pet : plays
Dog o--> Collar
Dog *--> Tail
Dog ..> Food
"""


class TestLookups:
    def setup_method(self):
        self.d = parse_plantuml(LOOKUP_DIAGRAM)
        self.dog = self.d.classes[0]

    def test_first_inheritance_wins(self):
        assert find_parent_class(self.dog, self.d).name == "Animal"

    def test_unresolvable_parent_is_none(self):
        d = parse_plantuml("class A\nA <|-- Ghost\nA <|-- B\nclass B")
        assert find_parent_class(d.classes[0], d) is None

    def test_no_parent(self):
        assert find_parent_class(self.d.classes[1], self.d) is None

    def test_implemented_interfaces_filter_unknown_and_duplicates(self):
        assert [i.name for i in find_implemented_interfaces(self.dog, self.d)] == ["Named"]

    def test_extended_interfaces(self):
        runner = self.d.interfaces[2]
        assert [i.name for i in find_extended_interfaces(runner, self.d)] == ["Walker"]

    def test_associations(self):
        rels = find_associations(self.dog, self.d)
        assert [(r.target, r.type) for r in rels] == [
            ("Pet", "association"),
            ("Collar", "aggregation"),
            ("Tail", "composition"),
        ]
        assert rels[0].label == "plays"

    def test_find_entity_prefers_classes(self):
        d = parse_plantuml("interface Thing\nclass Thing")
        assert type(find_entity("Thing", d)).__name__ == "ClassDef"
        assert find_entity("Nothing", d) is None

    def test_package_of(self):
        d = parse_plantuml("package p {\n  class A\n}\nclass B")
        assert package_of(d.classes[0], d) == "p"
        assert package_of(d.classes[1], d) is None


# ============================================================================
# Helpers
# ============================================================================


class TestIndent:
    def test_prefixes_non_empty_lines(self):
        assert indent("a\n\nb", 1, 4) == "    a\n\n    b"

    def test_levels_multiply(self):
        assert indent("x", 2, 2) == "    x"

    def test_level_zero(self):
        assert indent("x\ny", 0) == "x\ny"


class TestTypeHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Map<String, Integer>", True),
            ("List<", False),
            ("int", False),
            (TypeRef("List", (TypeRef("int"),)), True),
            (TypeRef("int"), False),
            (None, False),
        ],
    )
    def test_is_complex_generic_type(self, value, expected):
        assert is_complex_generic_type(value) is expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Map<String, Integer>", "Map"),
            ("int", "int"),
            (TypeRef("List", (TypeRef("int"),)), "List"),
            (TypeRef("User"), "User"),
        ],
    )
    def test_extract_base_generic_type(self, value, expected):
        assert extract_base_generic_type(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("boolean", "boolean"),
            ("Bool", "boolean"),
            ("int", "numeric"),
            ("Integer", "numeric"),
            ("double", "numeric"),
            ("char", "character"),
            ("String", "text"),
            ("void", "void"),
            (None, "void"),
            ("User", "other"),
            (TypeRef("List", (TypeRef("String"),)), "other"),
        ],
    )
    def test_default_kind(self, value, expected):
        assert default_kind(value) == expected
