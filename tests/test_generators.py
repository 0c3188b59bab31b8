"""Tests for the seven language generators.

Covers: completeness of class rendering in every language, the User
scenario, inheritance clauses, packages, enums, generic erasure, statics.
"""
from __future__ import annotations

import pytest

from plantuml_transpiler.generators import GENERATORS, generate
from plantuml_transpiler.generators.csharp import CSharpGenerator
from plantuml_transpiler.generators.java import JavaGenerator
from plantuml_transpiler.generators.javascript import JavaScriptGenerator
from plantuml_transpiler.generators.kotlin import KotlinGenerator
from plantuml_transpiler.generators.python import PythonGenerator
from plantuml_transpiler.generators.ruby import RubyGenerator
from plantuml_transpiler.generators.typescript import TypeScriptGenerator
from plantuml_transpiler.parser import parse_plantuml


def render(generator, text: str) -> str:
    return generate(parse_plantuml(text), generator)


ACCOUNT = """\
@startuml
class Account {
  -id: int
  -owner: String
  +Account(id: int, owner: String)
  {abstract} +audit(): void
  +getBalance(): double
}
@enduml
"""

USER = """\
@startuml
class User {
  -id: int
  +getName(): String
}
@enduml
"""

HIERARCHY = """\
class Animal {
}
interface Pet {
}
class Dog {
}
Dog <|-- Animal
Dog <|.. Pet
"""


# ============================================================================
# Completeness -- every language renders every part of a class
# ============================================================================


COMPLETENESS = {
    "java": [
        "public class Account {",
        "private int id;",
        "private String owner;",
        "public Account(int id, String owner) {",
        "public abstract void audit();",
        "public double getBalance() {",
        "return 0;",
    ],
    "csharp": [
        "public class Account",
        "private int id { get; set; }",
        "private string owner { get; set; }",
        "public Account(int id, string owner)",
        "public abstract void audit();",
        "public double getBalance()",
        "return 0;",
    ],
    "python": [
        "class Account:",
        "self._id = id",
        "self._owner = owner",
        "def __init__(self, id: int, owner: str) -> None:",
        "def audit(self) -> None: ...",
        "def getBalance(self) -> float:",
        "return 0",
    ],
    "ruby": [
        "class Account",
        "attr_accessor :id",
        "attr_accessor :owner",
        "def initialize(id = nil, owner = nil)",
        "raise NotImplementedError, 'Account#audit is abstract'",
        "def getBalance",
        "# TODO: Implement method\n    0\n",
    ],
    "kotlin": [
        "class Account {",
        "private var id: Int = 0",
        'private var owner: String = ""',
        "constructor(id: Int, owner: String) {",
        "abstract fun audit()\n",
        "fun getBalance(): Double {",
        "return 0.0",
    ],
    "javascript": [
        "class Account {",
        "this.id = id;",
        "this.owner = owner;",
        "constructor(id, owner) {",
        "audit() {\n    throw new Error('Method must be implemented by subclass');",
        "getBalance() {",
        "return 0;",
    ],
    "typescript": [
        "export class Account {",
        "private id: number;",
        "private owner: string;",
        "public constructor(id: number, owner: string) {",
        "public abstract audit(): void;",
        "public getBalance(): number {",
        "return 0;",
    ],
}


class TestCompleteness:
    def test_every_language_is_covered(self):
        assert set(COMPLETENESS) == set(GENERATORS)

    @pytest.mark.parametrize("language", sorted(COMPLETENESS))
    def test_class_parts_are_rendered(self, language):
        out = render(GENERATORS[language](), ACCOUNT)
        for fragment in COMPLETENESS[language]:
            assert fragment in out, f"{language}: missing {fragment!r}\n{out}"

    @pytest.mark.parametrize("language", sorted(GENERATORS))
    def test_abstract_method_has_no_placeholder_body(self, language):
        d = parse_plantuml("abstract class Shape {\n  {abstract} +area(): double\n}")
        out = generate(d, GENERATORS[language]())
        assert "Implement method" not in out

    @pytest.mark.parametrize("language", sorted(GENERATORS))
    def test_unresolvable_references_are_tolerated(self, language):
        d = parse_plantuml("class Dog {\n}\nDog <|-- Ghost\nDog <|.. Phantom")
        out = generate(d, GENERATORS[language]())
        assert "Ghost" not in out
        assert "Phantom" not in out
        assert "Dog" in out

    @pytest.mark.parametrize("language", sorted(GENERATORS))
    def test_orphan_package_member(self, language):
        d = parse_plantuml("package p {\n  class A {\n  }\n}")
        d.packages["p"].append("Ghost")
        out = generate(d, GENERATORS[language]())
        assert "Ghost" not in out


# ============================================================================
# The User scenario
# ============================================================================


class TestUserScenario:
    def test_java(self):
        out = render(JavaGenerator(), USER)
        assert "public class User {" in out
        assert "private int id;" in out
        assert "public String getName() {" in out
        assert 'return "";' in out

    def test_csharp(self):
        out = render(CSharpGenerator(), USER)
        assert "public class User" in out
        assert "private int id { get; set; }" in out
        assert "public string getName()" in out
        assert 'return "";' in out

    def test_typescript(self):
        out = render(TypeScriptGenerator(), USER)
        assert "export class User {" in out
        assert "private id: number;" in out
        assert "public getName(): string {" in out
        assert 'return "";' in out

    def test_kotlin(self):
        out = render(KotlinGenerator(), USER)
        assert "class User {" in out
        assert "private var id: Int = 0" in out
        assert "fun getName(): String {" in out
        assert 'return ""' in out


# ============================================================================
# Java
# ============================================================================


class TestJava:
    def test_extends_and_implements(self):
        out = render(JavaGenerator(), HIERARCHY)
        assert "public class Dog extends Animal implements Pet {" in out
        assert "super();" in out

    def test_default_constructor_only_for_concrete_classes(self):
        out = render(JavaGenerator(), "class Dog {\n}\nabstract class Shape {\n}")
        assert "public Dog() {" in out
        assert "public abstract class Shape {" in out
        assert "Shape()" not in out

    def test_generic_types_are_erased(self):
        out = render(JavaGenerator(), "class A {\n  -tags: Map<String, List<String>>\n}")
        assert "private Map<Object, Object> tags;" in out

    def test_generic_class_parameters(self):
        out = render(JavaGenerator(), "class Box<T> {\n  -item: T\n}")
        assert "public class Box<T> {" in out
        assert "private T item;" in out

    def test_static_final_and_package_visibility(self):
        out = render(JavaGenerator(), "class A {\n  +{static} {final} MAX: int\n  ~count: int\n}")
        assert "public static final int MAX;" in out
        assert "\n    int count;" in out

    def test_package_declaration(self):
        out = render(JavaGenerator(), "package com.shop {\n  class Order {\n  }\n}")
        assert "package com.shop;" in out

    def test_interface_signatures(self):
        out = render(JavaGenerator(), "interface Repo {\n  +find(id: int): User\n}")
        assert "public interface Repo {" in out
        assert "User find(int id);" in out

    def test_enum_ordinals(self):
        out = render(JavaGenerator(), "enum Color {\n  RED\n  GREEN\n}")
        assert "public enum Color {" in out
        assert "RED(0),\n    GREEN(1);" in out

    def test_indent_size(self):
        out = render(JavaGenerator(indent_size=2), USER)
        assert "\n  private int id;" in out


# ============================================================================
# C#
# ============================================================================


class TestCSharp:
    def test_namespace_indents_members(self):
        out = render(CSharpGenerator(), "package shop {\n  class Order {\n    -id: int\n  }\n}")
        assert "namespace shop\n{\n    /// <summary>" in out
        assert "\n    public class Order\n    {" in out
        assert "\n        private int id { get; set; }" in out

    def test_base_list(self):
        out = render(CSharpGenerator(), HIERARCHY)
        assert "public class Dog : Animal, Pet" in out
        assert " : base()" in out

    def test_visibility_and_final(self):
        out = render(CSharpGenerator(), "class A {\n  ~count: int\n  {final} +code: String\n}")
        assert "internal int count { get; set; }" in out
        assert "public string code { get; }" in out

    def test_generic_erasure_and_default(self):
        out = render(CSharpGenerator(), "class A {\n  +tags(): Map<String, Integer>\n}")
        assert "public Dictionary<object, object> tags()" in out
        assert "return default;" in out

    def test_enum(self):
        out = render(CSharpGenerator(), "enum Color {\n  RED\n  GREEN\n}")
        assert "RED = 0,\n    GREEN = 1" in out


# ============================================================================
# Python
# ============================================================================


class TestPython:
    def test_header_imports(self):
        out = render(PythonGenerator(), USER)
        assert out.startswith("from __future__ import annotations\n")
        assert "from abc import ABC, abstractmethod" in out

    def test_user_class(self):
        out = render(PythonGenerator(), USER)
        assert "class User:" in out
        assert "def __init__(self) -> None:" in out
        assert "self._id: int = 0" in out
        assert "def getName(self) -> str:" in out
        assert 'return ""' in out

    def test_interface_and_abstract_class(self):
        out = render(
            PythonGenerator(),
            "interface Repo {\n  +find(id: int): User\n}\nabstract class Shape {\n}",
        )
        assert "class Repo(ABC):" in out
        assert "@abstractmethod\n    def find(self, id: int) -> User: ..." in out
        assert "class Shape(ABC):" in out

    def test_bases_and_super_call(self):
        out = render(PythonGenerator(), HIERARCHY)
        assert "class Dog(Animal, Pet):" in out
        assert "super().__init__()" in out

    def test_several_constructors_become_overloads(self):
        out = render(
            PythonGenerator(),
            "class P {\n  +P(x: int)\n  +P(x: int, y: int)\n}",
        )
        assert out.count("@overload") == 2
        assert "def __init__(self, *args: Any, **kwargs: Any) -> None:" in out

    def test_statics_generics_and_erasure(self):
        out = render(
            PythonGenerator(),
            "class Box<T> {\n  +{static} count: int\n  -tags: Map<String, List<String>>\n}",
        )
        assert 'T = TypeVar("T")' in out
        assert "class Box(Generic[T]):" in out
        assert "count: ClassVar[int] = 0" in out
        assert "Dict[Any, Any]" in out

    def test_enum_values_start_at_one(self):
        out = render(PythonGenerator(), "enum Color {\n  RED\n  GREEN\n}")
        assert "class Color(Enum):" in out
        assert "RED = 1\n    GREEN = 2" in out

    def test_package_comment(self):
        out = render(PythonGenerator(), "package shop {\n  class Order {\n  }\n}")
        assert "# Package: shop" in out


# ============================================================================
# Ruby
# ============================================================================


class TestRuby:
    def test_nested_modules_for_package(self):
        out = render(RubyGenerator(), "package com.my_shop {\n  class Order {\n  }\n}")
        assert "module Com\n  module MyShop\n" in out
        assert "\n    class Order\n" in out
        assert "  end\nend\n" in out

    def test_private_attribute(self):
        out = render(RubyGenerator(), USER)
        assert "attr_accessor :id\n  private :id, :id=" in out
        assert "@id = 0" in out
        assert "def getName\n    # TODO: Implement method\n    ''\n  end" in out

    def test_interface_module_and_include(self):
        out = render(RubyGenerator(), HIERARCHY + "interface Walker {\n  +walk(): void\n}")
        assert "class Dog < Animal" in out
        assert "include Pet" in out
        assert "module Walker" in out
        assert "raise NotImplementedError, 'Walker#walk is abstract'" in out

    def test_statics(self):
        out = render(
            RubyGenerator(),
            "class A {\n  +{static} count: int\n  +{static} {final} max: int\n}",
        )

        assert "@@count = 0" in out
        assert "MAX = 0" in out

    def test_enum(self):
        out = render(RubyGenerator(), "enum Color {\n  RED\n  GREEN\n}")
        assert "module Color" in out
        assert "RED = 1\n  GREEN = 2" in out
        assert "VALUES = [RED, GREEN].freeze" in out


# ============================================================================
# Kotlin
# ============================================================================


class TestKotlin:
    def test_open_parent_and_secondary_constructor(self):
        out = render(KotlinGenerator(), HIERARCHY)
        assert "open class Animal {" in out
        assert "class Dog : Animal, Pet {" in out
        assert "constructor() : super() {" in out

    def test_abstract_class_without_constructor_calls_parent_in_header(self):
        out = render(
            KotlinGenerator(),
            "abstract class Shape {\n}\nclass Base {\n}\nShape <|-- Base",
        )

        assert "abstract class Shape : Base() {" in out

    def test_companion_object(self):
        out = render(
            KotlinGenerator(),
            "class A {\n  +{static} count: int\n  +{static} create(): A\n}",
        )

        assert "companion object {" in out
        assert "var count: Int = 0" in out
        assert "fun create(): A {" in out
        assert "return null" in out

    def test_nullable_reference_property(self):
        out = render(
            KotlinGenerator(),
            "class A {\n  -owner: User\n  {final} +tags: List<String>\n}",
        )

        assert "private var owner: User? = null" in out
        assert "val tags: List<Any>? = null" in out

    def test_enum(self):
        out = render(KotlinGenerator(), "enum Color {\n  RED\n  GREEN\n}")
        assert "enum class Color(val value: Int) {" in out
        assert "RED(0),\n    GREEN(1);" in out


# ============================================================================
# JavaScript
# ============================================================================


class TestJavaScript:
    def test_packages_are_ignored(self):
        out = render(JavaScriptGenerator(), "package p {\n  class A {\n  }\n}")
        assert "package" not in out
        assert "namespace" not in out
        assert "class A {" in out
        assert out.endswith("module.exports = { A };\n")

    def test_user_class(self):
        out = render(JavaScriptGenerator(), USER)
        assert "/** @private @type {number} */\n    this.id = 0;" in out
        assert "getName() {" in out
        assert "return '';" in out

    def test_interface_guard(self):
        out = render(JavaScriptGenerator(), "interface Repo {\n  +find(id: int): User\n}")
        assert "if (new.target === Repo) {" in out
        assert "find(id) {" in out

    def test_extends_and_jsdoc_implements(self):
        out = render(JavaScriptGenerator(), HIERARCHY)
        assert "class Dog extends Animal {" in out
        assert "@implements {Pet}" in out

    def test_enum_and_static(self):
        out = render(
            JavaScriptGenerator(),
            "enum Color {\n  RED\n  GREEN\n}\nclass A {\n  +{static} count: int\n}",
        )

        assert "const Color = Object.freeze({\n  RED: 0,\n  GREEN: 1,\n});" in out
        assert "static count = 0;" in out


# ============================================================================
# TypeScript
# ============================================================================


class TestTypeScript:
    def test_namespace(self):
        out = render(TypeScriptGenerator(), "package shop {\n  class Order {\n  }\n}")
        assert "export namespace shop {\n" in out
        assert "\n  export class Order {" in out

    def test_interface_and_enum(self):
        out = render(
            TypeScriptGenerator(),
            "interface Repo {\n  +find(id: int): User\n}\nenum Color {\n  RED\n  GREEN\n}",
        )
        assert "export interface Repo {" in out
        assert "find(id: number): User;" in out
        assert "export enum Color {\n  RED = 0,\n  GREEN = 1,\n}" in out

    def test_visibility_generics_and_defaults(self):
        out = render(
            TypeScriptGenerator(),
            "class A {\n  ~count: int\n  +tags(): Map<String, Integer>\n  +owner(): User\n}",
        )
        assert "protected count: number;" in out
        assert "public tags(): Map<any, any> {" in out
        assert "return null as any;" in out

    def test_constructor_overloads(self):
        out = render(TypeScriptGenerator(), "class P {\n  +P(x: int)\n  +P(x: int, y: int)\n}")
        assert "public constructor(x: number);" in out
        assert "public constructor(x: number, y: number);" in out
        assert "public constructor(...args: any[]) {" in out
