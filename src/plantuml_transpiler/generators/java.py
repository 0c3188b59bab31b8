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
# Java
# ============================================================================

_TYPES = {
    "string": "String",
    "str": "String",
    "text": "String",
    "bool": "boolean",
    "boolean": "boolean",
    "int": "int",
    "integer": "int",
    "long": "long",
    "short": "short",
    "byte": "byte",
    "float": "float",
    "double": "double",
    "number": "double",
    "char": "char",
    "character": "char",
    "void": "void",
    "object": "Object",
    "any": "Object",
}

_CONTAINERS = {
    "list": "List",
    "array": "List",
    "arraylist": "ArrayList",
    "map": "Map",
    "dict": "Map",
    "hashmap": "HashMap",
    "set": "Set",
    "hashset": "HashSet",
    "collection": "Collection",
    "iterable": "Iterable",
    "optional": "Optional",
}

_VISIBILITY = {
    "public": "public",
    "private": "private",
    "protected": "protected",
    # package-private has no keyword
    "package": "",
}

_DEFAULTS = {
    "boolean": "false",
    "numeric": "0",
    "character": "' '",
    "text": '""',
    "other": "null",
}


class JavaGenerator:
    """Java source: one top-level type per entity, Javadoc and stub bodies."""

    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 4

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return "import java.util.*;\n\n"

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        return f"package {name};\n\n"

    def generate_package_end(self, name: str) -> str:
        return ""

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        interfaces = find_implemented_interfaces(cls, diagram)

        header = ["public"]
        if cls.is_abstract:
            header.append("abstract")
        header += ["class", cls.name + _generics(cls.generics)]
        if parent is not None:
            header += ["extends", parent.name]
        if interfaces:
            header += ["implements", ", ".join(i.name for i in interfaces)]

        blocks: list[str] = []
        if cls.attributes:
            blocks.append("\n".join(self._attribute(a) for a in cls.attributes))

        constructors = cls.constructors
        if not constructors and not cls.is_abstract:
            constructors = [Method(name=cls.name, return_type=None)]
        for ctor in constructors:
            blocks.append(self._constructor(ctor, cls.name, parent is not None))

        blocks.extend(self._method(m) for m in cls.methods)

        return self._type_block(f"{cls.name} class", " ".join(header), blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        header = f"public interface {iface.name}{_generics(iface.generics)}"
        parents = find_extended_interfaces(iface, diagram)
        if parents:
            header += " extends " + ", ".join(p.name for p in parents)

        blocks = [self._signature(m, in_interface=True) for m in iface.methods]
        return self._type_block(f"{iface.name} interface", header, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        values = [f"{value}({i})" for i, value in enumerate(enum.values)]
        constants = ",\n".join(values) + ";" if values else ";"
        blocks = [
            constants,
            "private final int value;",
            f"{enum.name}(int value) {{\n{self._indent('this.value = value;')}\n}}",
            f"public int getValue() {{\n{self._indent('return value;')}\n}}",
        ]
        return self._type_block(f"{enum.name} enum", f"public enum {enum.name}", blocks)

    # -- members -----------------------------------------------------------

    def _attribute(self, attr: Attribute) -> str:
        tokens = [_VISIBILITY.get(attr.visibility, "public")]
        if attr.is_static:
            tokens.append("static")
        if attr.is_final:
            tokens.append("final")
        tokens += [self.map_type(attr.type), attr.name]
        return " ".join(t for t in tokens if t) + ";"

    def _constructor(self, ctor: Method, class_name: str, has_parent: bool) -> str:
        doc = _javadoc([f"Creates a new {class_name}"], ctor.parameters, None)
        visibility = _VISIBILITY.get(ctor.visibility, "public")
        signature = f"{visibility} {class_name}({self._params(ctor.parameters)})".strip()
        body = ["super();"] if has_parent else []
        body.append("// TODO: Implement constructor")
        return f"{doc}\n{signature} {{\n{self._indent(_lines(body))}\n}}"

    def _method(self, method: Method) -> str:
        if method.is_abstract:
            return self._signature(method)
        doc = _javadoc([method.name], method.parameters, method.return_type)
        body = ["// TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {self._default(method.return_type)};")
        head = self._declaration(method)
        return f"{doc}\n{head} {{\n{self._indent(_lines(body))}\n}}"

    def _signature(self, method: Method, in_interface: bool = False) -> str:
        doc = _javadoc([method.name], method.parameters, method.return_type)
        return f"{doc}\n{self._declaration(method, in_interface)};"

    def _declaration(self, method: Method, in_interface: bool = False) -> str:
        tokens = [] if in_interface else [_VISIBILITY.get(method.visibility, "public")]
        if method.is_abstract and not in_interface:
            tokens.append("abstract")
        if method.is_static:
            tokens.append("static")
        tokens.append(self.map_type(method.return_type))
        tokens.append(f"{method.name}({self._params(method.parameters)})")
        return " ".join(t for t in tokens if t)

    def _params(self, params: list[Parameter]) -> str:
        return ", ".join(f"{self.map_type(p.type)} {p.name}" for p in params)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "void"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
            return f"{base}<{', '.join('Object' for _ in type_ref.args)}>"
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _default(self, type_ref: TypeRef | None) -> str:
        return _DEFAULTS.get(default_kind(type_ref), "null")

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _type_block(self, summary: str, header: str, blocks: list[str]) -> str:
        lines = ["/**", f" * {summary}", " */", header + " {"]
        if blocks:
            lines.append(self._indent("\n\n".join(blocks)))
        lines.append("}")
        return "\n".join(lines) + "\n\n"


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)


def _generics(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def _javadoc(summary: list[str], params: list[Parameter], returns: TypeRef | None) -> str:
    lines = ["/**"] + [f" * {s}" for s in summary]
    lines += [f" * @param {p.name} the {p.name}" for p in params]
    if returns is not None and default_kind(returns) != "void":
        lines.append(f" * @return {returns}")
    lines.append(" */")
    return "\n".join(lines)
