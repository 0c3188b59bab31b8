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
    has_subclasses,
    indent,
)

# ============================================================================
# Kotlin
#
# Constructors are secondary constructors; static members live in a
# companion object. Classes that something inherits from are marked open.
# ============================================================================

_TYPES = {
    "string": "String",
    "str": "String",
    "text": "String",
    "bool": "Boolean",
    "boolean": "Boolean",
    "int": "Int",
    "integer": "Int",
    "long": "Long",
    "short": "Short",
    "byte": "Byte",
    "float": "Float",
    "double": "Double",
    "number": "Double",
    "decimal": "Double",
    "char": "Char",
    "character": "Char",
    "void": "Unit",
    "object": "Any",
    "any": "Any",
}

_CONTAINERS = {
    "list": "List",
    "arraylist": "MutableList",
    "array": "Array",
    "map": "Map",
    "hashmap": "MutableMap",
    "dict": "Map",
    "set": "Set",
    "hashset": "MutableSet",
    "collection": "Collection",
    "iterable": "Iterable",
}

# Public is Kotlin's default
_VISIBILITY = {
    "public": "",
    "private": "private",
    "protected": "protected",
    "package": "internal",
}

# Literal 0 only types as Int
_NUMERIC_LITERALS = {
    "Long": "0L",
    "Float": "0.0f",
    "Double": "0.0",
}

_DEFAULTS = {
    "boolean": "false",
    "character": "' '",
    "text": '""',
}


class KotlinGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 4

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        return f"package {name}\n\n"

    def generate_package_end(self, name: str) -> str:
        return ""

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        constructors = cls.constructors
        if not constructors and not cls.is_abstract:
            constructors = [Method(name=cls.name, return_type=None)]

        if cls.is_abstract:
            modifier = "abstract "
        elif has_subclasses(cls, diagram):
            modifier = "open "
        else:
            modifier = ""
        head = f"{modifier}class {cls.name}{_generics(cls.generics)}"

        supertypes = []
        if parent is not None:
            # Without secondary constructors the implicit primary one calls super
            supertypes.append(parent.name if constructors else f"{parent.name}()")
        supertypes += [i.name for i in find_implemented_interfaces(cls, diagram)]
        if supertypes:
            head += " : " + ", ".join(supertypes)

        blocks: list[str] = []
        instance = [a for a in cls.attributes if not a.is_static]
        if instance:
            blocks.append("\n".join(self._property(a) for a in instance))
        blocks.extend(self._constructor(c, parent is not None) for c in constructors)
        blocks.extend(self._method(m) for m in cls.methods if not m.is_static)

        companion = [self._property(a) for a in cls.attributes if a.is_static]
        companion += [self._method(m) for m in cls.methods if m.is_static]
        if companion:
            blocks.append(f"companion object {{\n{self._indent(_join(companion))}\n}}")

        return self._block(f"{cls.name} class", head, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        head = f"interface {iface.name}{_generics(iface.generics)}"
        parents = find_extended_interfaces(iface, diagram)
        if parents:
            head += " : " + ", ".join(p.name for p in parents)
        blocks = [self._signature(m, in_interface=True) for m in iface.methods]
        return self._block(f"{iface.name} interface", head, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        blocks = []
        if enum.values:
            blocks.append(",\n".join(f"{v}({i})" for i, v in enumerate(enum.values)) + ";")
        head = f"enum class {enum.name}(val value: Int)"
        return self._block(f"{enum.name} enum", head, blocks)

    # -- members -----------------------------------------------------------

    def _property(self, attr: Attribute) -> str:
        keyword = "val" if attr.is_final else "var"
        mapped = self.map_type(attr.type)
        if default_kind(attr.type) in ("boolean", "numeric", "character", "text"):
            declared = mapped
        else:
            declared = mapped if mapped.endswith("?") else f"{mapped}?"
        tokens = [_VISIBILITY.get(attr.visibility, ""), keyword, f"{attr.name}: {declared}"]
        return " ".join(t for t in tokens if t) + f" = {self._default(attr.type)}"

    def _constructor(self, ctor: Method, has_parent: bool) -> str:
        visibility = _VISIBILITY.get(ctor.visibility, "")
        head = f"constructor({self._params(ctor.parameters)})"
        if visibility:
            head = f"{visibility} {head}"
        if has_parent:
            head += " : super()"
        return f"{head} {{\n{self._indent('// TODO: Implement constructor')}\n}}"

    def _method(self, method: Method) -> str:
        if method.is_abstract:
            return self._signature(method)
        body = ["// TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {self._default(method.return_type)}")
        return f"{self._signature(method)} {{\n{self._indent(_lines(body))}\n}}"

    def _signature(self, method: Method, in_interface: bool = False) -> str:
        tokens = [] if in_interface else [_VISIBILITY.get(method.visibility, "")]
        if method.is_abstract and not in_interface:
            tokens.append("abstract")
        tokens.append(f"fun {method.name}({self._params(method.parameters)})")
        signature = " ".join(t for t in tokens if t)
        if default_kind(method.return_type) != "void":
            signature += f": {self.map_type(method.return_type)}"
        return signature

    def _params(self, params: list[Parameter]) -> str:
        return ", ".join(f"{p.name}: {self.map_type(p.type)}" for p in params)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "Unit"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
            return f"{base}<{', '.join('Any' for _ in type_ref.args)}>"
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _default(self, type_ref: TypeRef | None) -> str:
        kind = default_kind(type_ref)
        if kind == "numeric":
            return _NUMERIC_LITERALS.get(self.map_type(type_ref), "0")
        return _DEFAULTS.get(kind, "null")

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _block(self, summary: str, head: str, blocks: list[str]) -> str:
        lines = ["/**", f" * {summary}", " */", head + " {"]
        if blocks:
            lines.append(self._indent(_join(blocks)))
        lines.append("}")
        return _lines(lines) + "\n\n"


def _generics(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def _join(blocks: list[str]) -> str:
    return "\n\n".join(blocks)


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)
