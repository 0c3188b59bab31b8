from __future__ import annotations

from ..types import (
    Attribute,
    ClassDef,
    ClassDiagram,
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
)

# ============================================================================
# Python
#
# Interfaces and abstract classes derive from ABC. Private and protected
# members take a leading underscore. Several declared constructors turn
# into typing.overload signatures over one __init__.
# ============================================================================

_TYPES = {
    "string": "str",
    "str": "str",
    "text": "str",
    "char": "str",
    "character": "str",
    "bool": "bool",
    "boolean": "bool",
    "int": "int",
    "integer": "int",
    "long": "int",
    "short": "int",
    "byte": "int",
    "float": "float",
    "double": "float",
    "number": "float",
    "decimal": "float",
    "void": "None",
    "object": "Any",
    "any": "Any",
    "list": "List[Any]",
    "map": "Dict[Any, Any]",
    "dict": "Dict[Any, Any]",
    "set": "Set[Any]",
}

_CONTAINERS = {
    "list": "List",
    "arraylist": "List",
    "array": "List",
    "collection": "List",
    "map": "Dict",
    "hashmap": "Dict",
    "dict": "Dict",
    "dictionary": "Dict",
    "set": "Set",
    "hashset": "Set",
    "iterable": "Iterable",
    "optional": "Optional",
}

_PREFIX = {
    "public": "",
    "package": "",
    "protected": "_",
    "private": "_",
}

_DEFAULTS = {
    "boolean": "False",
    "numeric": "0",
    "character": '" "',
    "text": '""',
}

_HEADER = """\
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, Iterable, List, Optional, Set, TypeVar, overload

"""


class PythonGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 4

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return _HEADER

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        return f"# Package: {name}\n\n"

    def generate_package_end(self, name: str) -> str:
        return ""

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        bases = [parent.name] if parent is not None else []
        bases += [i.name for i in find_implemented_interfaces(cls, diagram)]
        if cls.is_abstract and not bases:
            bases.append("ABC")

        static = [a for a in cls.attributes if a.is_static]
        instance = [a for a in cls.attributes if not a.is_static]

        blocks = [f'"""{cls.name} class."""']
        fields = [self._class_var(a) for a in static]
        if cls.is_abstract and not cls.constructors:
            # No __init__ to hold them
            fields += [f"{_member_name(a)}: {self.map_type(a.type)}" for a in instance]
        if fields:
            blocks.append("\n".join(fields))

        if cls.constructors:
            blocks.extend(self._constructors(cls.constructors, instance, parent is not None))
        elif not cls.is_abstract:
            default = Method(name=cls.name, return_type=None)
            blocks.extend(self._constructors([default], instance, parent is not None))

        blocks.extend(self._method(m) for m in cls.methods)
        return self._class_block(cls.name, cls.generics, bases, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        bases = [p.name for p in find_extended_interfaces(iface, diagram)] or ["ABC"]
        blocks = [f'"""{iface.name} interface."""']
        blocks.extend(self._abstract(m) for m in iface.methods)
        return self._class_block(iface.name, iface.generics, bases, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        blocks = [f'"""{enum.name} enum."""']
        if enum.values:
            blocks.append("\n".join(f"{v} = {i}" for i, v in enumerate(enum.values, start=1)))
        return self._class_block(enum.name, [], ["Enum"], blocks)

    # -- members -----------------------------------------------------------

    def _class_var(self, attr: Attribute) -> str:
        annotation = f"ClassVar[{self._optional(attr.type)}]"
        return f"{_member_name(attr)}: {annotation} = {_default(attr.type)}"

    def _constructors(
        self, ctors: list[Method], instance: list[Attribute], has_parent: bool
    ) -> list[str]:
        blocks: list[str] = []
        if len(ctors) > 1:
            blocks += [
                f"@overload\ndef __init__({self._params(c.parameters)}) -> None: ..."
                for c in ctors
            ]
            signature = "self, *args: Any, **kwargs: Any"
            param_names: set[str] = set()
        else:
            signature = self._params(ctors[0].parameters)
            param_names = {p.name for p in ctors[0].parameters}

        body = ['"""Initialize a new instance."""']
        if has_parent:
            body.append("super().__init__()")
        for attr in instance:
            if attr.name in param_names:
                body.append(f"self.{_member_name(attr)} = {attr.name}")
            else:
                annotation = self._optional(attr.type)
                body.append(f"self.{_member_name(attr)}: {annotation} = {_default(attr.type)}")
        body.append("# TODO: Implement constructor")
        blocks.append(f"def __init__({signature}) -> None:\n{self._indent(_lines(body))}")
        return blocks

    def _method(self, method: Method) -> str:
        if method.is_abstract:
            return self._abstract(method)
        body = [f'"""{method.name} method."""', "# TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {_default(method.return_type)}")
        return f"{self._def(method)}\n{self._indent(_lines(body))}"

    def _abstract(self, method: Method) -> str:
        return f"{self._def(method, abstract=True)} ..."

    def _def(self, method: Method, abstract: bool = False) -> str:
        decorators = "@staticmethod\n" if method.is_static else ""
        if abstract:
            decorators += "@abstractmethod\n"
        params = self._params(method.parameters, with_self=not method.is_static)
        name = _PREFIX.get(method.visibility, "") + method.name
        return f"{decorators}def {name}({params}) -> {self.map_type(method.return_type)}:"

    def _params(self, params: list[Parameter], with_self: bool = True) -> str:
        rendered = [f"{p.name}: {self.map_type(p.type)}" for p in params]
        return ", ".join((["self"] if with_self else []) + rendered)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "None"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower())
            if base is None:
                return type_ref.name
            return f"{base}[{', '.join('Any' for _ in type_ref.args)}]"
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _optional(self, type_ref: TypeRef) -> str:
        mapped = self.map_type(type_ref)
        if default_kind(type_ref) in _DEFAULTS or mapped in ("Any", "None"):
            return mapped
        return f"Optional[{mapped}]"

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _class_block(
        self, name: str, generics: list[str], bases: list[str], blocks: list[str]
    ) -> str:
        lines: list[str] = []
        if generics:
            lines += [f'{g} = TypeVar("{g}")' for g in generics]
            lines.append("")
            bases = bases + [f"Generic[{', '.join(generics)}]"]
        head = f"class {name}({', '.join(bases)}):" if bases else f"class {name}:"
        lines.append(head)
        lines.append(self._indent("\n\n".join(blocks)))
        return "\n".join(lines) + "\n\n\n"


def _member_name(attr: Attribute) -> str:
    return _PREFIX.get(attr.visibility, "") + attr.name


def _default(type_ref: TypeRef | None) -> str:
    return _DEFAULTS.get(default_kind(type_ref), "None")


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)
