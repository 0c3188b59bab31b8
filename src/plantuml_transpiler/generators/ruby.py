from __future__ import annotations

import re

from ..types import (
    Attribute,
    ClassDef,
    ClassDiagram,
    Entity,
    EnumDef,
    InterfaceDef,
    Method,
    Parameter,
    TypeRef,
)
from .base import (
    default_kind,
    find_extended_interfaces,
    find_implemented_interfaces,
    find_parent_class,
    indent,
    package_of,
)

# ============================================================================
# Ruby
#
# Interfaces become modules that are included; a package `com.shop` becomes
# nested `module Com` / `module Shop`. Types only appear in YARD comments.
# ============================================================================

_TYPES = {
    "string": "String",
    "str": "String",
    "text": "String",
    "char": "String",
    "character": "String",
    "bool": "Boolean",
    "boolean": "Boolean",
    "int": "Integer",
    "integer": "Integer",
    "long": "Integer",
    "short": "Integer",
    "byte": "Integer",
    "float": "Float",
    "double": "Float",
    "number": "Numeric",
    "decimal": "BigDecimal",
    "void": "void",
    "object": "Object",
    "any": "Object",
}

_CONTAINERS = {
    "list": "Array",
    "arraylist": "Array",
    "array": "Array",
    "collection": "Array",
    "map": "Hash",
    "hashmap": "Hash",
    "dict": "Hash",
    "dictionary": "Hash",
    "set": "Set",
    "hashset": "Set",
    "iterable": "Enumerable",
}

# Ruby has no package visibility
_VISIBILITY = {
    "public": "public",
    "package": "public",
    "protected": "protected",
    "private": "private",
}

_DEFAULTS = {
    "boolean": "false",
    "numeric": "0",
    "character": "' '",
    "text": "''",
}


class RubyGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 2

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return "# frozen_string_literal: true\n\n"

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        modules = _module_names(name)
        return "\n".join(self._indent(f"module {m}", i) for i, m in enumerate(modules)) + "\n"

    def generate_package_end(self, name: str) -> str:
        depth = len(_module_names(name))
        return "\n".join(self._indent("end", i) for i in reversed(range(depth))) + "\n\n"

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        head = f"class {cls.name}"
        if parent is not None:
            head += f" < {parent.name}"

        blocks: list[str] = []
        includes = [f"include {i.name}" for i in find_implemented_interfaces(cls, diagram)]
        if includes:
            blocks.append("\n".join(includes))

        static = [a for a in cls.attributes if a.is_static]
        instance = [a for a in cls.attributes if not a.is_static]
        if static:
            blocks.append("\n".join(self._static(a) for a in static))
        if instance:
            blocks.append("\n".join(self._accessor(a) for a in instance))

        if cls.constructors:
            blocks.append(self._initialize(cls.constructors, instance, parent is not None))
        elif not cls.is_abstract:
            default = Method(name=cls.name, return_type=None)
            blocks.append(self._initialize([default], instance, parent is not None))

        blocks.extend(self._method(m, cls.name) for m in cls.methods)
        summary = f"{cls.name}{_generics(cls.generics)} class"
        if cls.is_abstract:
            summary = "Abstract " + summary
        return self._block(cls, diagram, summary, head, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        blocks: list[str] = []
        includes = [f"include {p.name}" for p in find_extended_interfaces(iface, diagram)]
        if includes:
            blocks.append("\n".join(includes))
        blocks.extend(self._abstract(m, iface.name) for m in iface.methods)
        summary = f"{iface.name}{_generics(iface.generics)} interface"
        return self._block(iface, diagram, summary, f"module {iface.name}", blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        blocks: list[str] = []
        if enum.values:
            blocks.append("\n".join(f"{v} = {i}" for i, v in enumerate(enum.values, start=1)))
            blocks.append(f"VALUES = [{', '.join(enum.values)}].freeze")
        return self._block(enum, diagram, f"{enum.name} enum", f"module {enum.name}", blocks)

    # -- members -----------------------------------------------------------

    def _static(self, attr: Attribute) -> str:
        if attr.is_final:
            return f"{attr.name.upper()} = {_default(attr.type)}"
        return f"@@{attr.name} = {_default(attr.type)}"

    def _accessor(self, attr: Attribute) -> str:
        visibility = _VISIBILITY.get(attr.visibility, "public")
        comment = f"# @return [{self.map_type(attr.type)}]"
        if attr.is_final:
            line = f"attr_reader :{attr.name}"
            hidden = f":{attr.name}"
        else:
            line = f"attr_accessor :{attr.name}"
            hidden = f":{attr.name}, :{attr.name}="
        if visibility != "public":
            line += f"\n{visibility} {hidden}"
        return f"{comment}\n{line}"

    def _initialize(self, ctors: list[Method], instance: list[Attribute], has_parent: bool) -> str:
        # Ruby has one initializer; declared parameter lists are merged
        params: list[Parameter] = []
        for ctor in ctors:
            for param in ctor.parameters:
                if all(p.name != param.name for p in params):
                    params.append(param)
        names = {p.name for p in params}

        body = ["super()"] if has_parent else []
        for attr in instance:
            value = attr.name if attr.name in names else _default(attr.type)
            body.append(f"@{attr.name} = {value}")
        body.append("# TODO: Implement constructor")

        doc = self._yard(params, None)
        signature = f"def initialize({', '.join(f'{p.name} = nil' for p in params)})"
        if not params:
            signature = "def initialize"
        text = f"{signature}\n{self._indent(_lines(body))}\nend"
        return f"{doc}\n{text}" if doc else text

    def _method(self, method: Method, owner: str) -> str:
        if method.is_abstract:
            return self._abstract(method, owner)
        body = ["# TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(_default(method.return_type))
        return self._def(method, body)

    def _abstract(self, method: Method, owner: str) -> str:
        body = [f"raise NotImplementedError, '{owner}#{method.name} is abstract'"]
        return self._def(method, body)

    def _def(self, method: Method, body: list[str]) -> str:
        name = f"self.{method.name}" if method.is_static else method.name
        params = ", ".join(p.name for p in method.parameters)
        signature = f"def {name}({params})" if params else f"def {name}"

        visibility = _VISIBILITY.get(method.visibility, "public")
        if visibility != "public":
            signature = f"{'private_class_method' if method.is_static else visibility} {signature}"

        text = f"{signature}\n{self._indent(_lines(body))}\nend"
        doc = self._yard(method.parameters, method.return_type)
        return f"{doc}\n{text}" if doc else text

    def _yard(self, params: list[Parameter], returns: TypeRef | None) -> str:
        lines = [f"# @param {p.name} [{self.map_type(p.type)}]" for p in params]
        if returns is not None and default_kind(returns) != "void":
            lines.append(f"# @return [{self.map_type(returns)}]")
        return _lines(lines)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "void"
        if type_ref.is_generic:
            return _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _block(
        self,
        entity: Entity,
        diagram: ClassDiagram,
        summary: str,
        head: str,
        blocks: list[str],
    ) -> str:
        lines = [f"# {summary}", head]
        if blocks:
            lines.append(self._indent("\n\n".join(blocks)))
        lines.append("end")
        text = _lines(lines)

        package = package_of(entity, diagram)
        if package is not None:
            text = self._indent(text, len(_module_names(package)))
        return text + "\n\n"


def _module_names(package: str) -> list[str]:
    """``com.my_shop`` -> ``["Com", "MyShop"]``."""
    modules = []
    for part in package.split("."):
        words = [w for w in re.split(r"[^0-9A-Za-z]+", part) if w]
        if words:
            modules.append("".join(w[0].upper() + w[1:] for w in words))
    return modules or ["Package"]


def _generics(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def _default(type_ref: TypeRef | None) -> str:
    return _DEFAULTS.get(default_kind(type_ref), "nil")


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)
