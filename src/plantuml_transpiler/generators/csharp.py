from __future__ import annotations

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
# C#
#
# Attributes become auto-properties; packages become namespaces, and every
# type inside one is indented a level.
# ============================================================================

_TYPES = {
    "string": "string",
    "str": "string",
    "text": "string",
    "bool": "bool",
    "boolean": "bool",
    "int": "int",
    "integer": "int",
    "long": "long",
    "short": "short",
    "byte": "byte",
    "float": "float",
    "double": "double",
    "number": "double",
    "decimal": "decimal",
    "char": "char",
    "character": "char",
    "void": "void",
    "object": "object",
    "any": "object",
    "date": "DateTime",
    "datetime": "DateTime",
}

_CONTAINERS = {
    "list": "List",
    "arraylist": "List",
    "array": "List",
    "map": "Dictionary",
    "hashmap": "Dictionary",
    "dict": "Dictionary",
    "dictionary": "Dictionary",
    "set": "HashSet",
    "hashset": "HashSet",
    "collection": "ICollection",
    "iterable": "IEnumerable",
}

_VISIBILITY = {
    "public": "public",
    "private": "private",
    "protected": "protected",
    "package": "internal",
}

_DEFAULTS = {
    "boolean": "false",
    "numeric": "0",
    "character": "' '",
    "text": '""',
    "other": "default",
}


class CSharpGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 4

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return "using System;\nusing System.Collections.Generic;\n\n"

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        return f"namespace {name}\n{{\n"

    def generate_package_end(self, name: str) -> str:
        return "}\n\n"

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        bases = [parent.name] if parent is not None else []
        bases += [i.name for i in find_implemented_interfaces(cls, diagram)]

        header = "public abstract class " if cls.is_abstract else "public class "
        header += cls.name + _generics(cls.generics)
        if bases:
            header += " : " + ", ".join(bases)

        blocks: list[str] = []
        if cls.attributes:
            blocks.append("\n".join(self._property(a) for a in cls.attributes))

        constructors = cls.constructors
        if not constructors and not cls.is_abstract:
            constructors = [Method(name=cls.name, return_type=None)]
        blocks.extend(self._constructor(c, cls.name, parent is not None) for c in constructors)
        blocks.extend(self._method(m) for m in cls.methods)

        return self._type_block(cls, diagram, f"{cls.name} class", header, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        header = f"public interface {iface.name}{_generics(iface.generics)}"
        parents = find_extended_interfaces(iface, diagram)
        if parents:
            header += " : " + ", ".join(p.name for p in parents)

        blocks = [
            f"{_summary(m.name, m.parameters, m.return_type)}\n{self._signature(m, True)};"
            for m in iface.methods
        ]
        return self._type_block(iface, diagram, f"{iface.name} interface", header, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        values = ",\n".join(f"{value} = {i}" for i, value in enumerate(enum.values))
        blocks = [values] if values else []
        header = f"public enum {enum.name}"
        return self._type_block(enum, diagram, f"{enum.name} enum", header, blocks)

    # -- members -----------------------------------------------------------

    def _property(self, attr: Attribute) -> str:
        tokens = [_VISIBILITY.get(attr.visibility, "public")]
        if attr.is_static:
            tokens.append("static")
        tokens += [self.map_type(attr.type), attr.name]
        accessors = "{ get; }" if attr.is_final else "{ get; set; }"
        return " ".join(tokens) + " " + accessors

    def _constructor(self, ctor: Method, class_name: str, has_parent: bool) -> str:
        visibility = _VISIBILITY.get(ctor.visibility, "public")
        head = f"{visibility} {class_name}({self._params(ctor.parameters)})"
        if has_parent:
            head += " : base()"
        doc = _summary(f"Initializes a new instance of {class_name}", ctor.parameters, None)
        return f"{doc}\n{head}\n{{\n{self._indent('// TODO: Implement constructor')}\n}}"

    def _method(self, method: Method) -> str:
        doc = _summary(method.name, method.parameters, method.return_type)
        if method.is_abstract:
            return f"{doc}\n{self._signature(method)};"
        body = ["// TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {_DEFAULTS.get(default_kind(method.return_type), 'default')};")
        return f"{doc}\n{self._signature(method)}\n{{\n{self._indent(_lines(body))}\n}}"

    def _signature(self, method: Method, in_interface: bool = False) -> str:
        tokens = [] if in_interface else [_VISIBILITY.get(method.visibility, "public")]
        if method.is_abstract and not in_interface:
            tokens.append("abstract")
        if method.is_static:
            tokens.append("static")
        tokens.append(self.map_type(method.return_type))
        tokens.append(f"{method.name}({self._params(method.parameters)})")
        return " ".join(tokens)

    def _params(self, params: list[Parameter]) -> str:
        return ", ".join(f"{self.map_type(p.type)} {p.name}" for p in params)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "void"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
            return f"{base}<{', '.join('object' for _ in type_ref.args)}>"
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _type_block(
        self,
        entity: Entity,
        diagram: ClassDiagram,
        summary: str,
        header: str,
        blocks: list[str],
    ) -> str:
        lines = ["/// <summary>", f"/// {summary}", "/// </summary>", header, "{"]
        if blocks:
            lines.append(self._indent("\n\n".join(blocks)))
        lines.append("}")
        text = "\n".join(lines)
        if package_of(entity, diagram) is not None:
            text = self._indent(text)
        return text + "\n\n"


def _generics(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)


def _summary(text: str, params: list[Parameter], returns: TypeRef | None) -> str:
    lines = ["/// <summary>", f"/// {text}", "/// </summary>"]
    lines += [f'/// <param name="{p.name}">The {p.name}</param>' for p in params]
    if returns is not None and default_kind(returns) != "void":
        lines.append(f"/// <returns>{returns}</returns>")
    return "\n".join(lines)
