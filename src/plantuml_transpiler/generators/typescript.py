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
# TypeScript
# ============================================================================

_TYPES = {
    "string": "string",
    "str": "string",
    "text": "string",
    "char": "string",
    "character": "string",
    "bool": "boolean",
    "boolean": "boolean",
    "int": "number",
    "integer": "number",
    "long": "number",
    "short": "number",
    "byte": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "number": "number",
    "void": "void",
    "object": "any",
    "any": "any",
    "date": "Date",
}

_CONTAINERS = {
    "list": "Array",
    "arraylist": "Array",
    "array": "Array",
    "collection": "Array",
    "map": "Map",
    "hashmap": "Map",
    "dict": "Map",
    "dictionary": "Map",
    "set": "Set",
    "hashset": "Set",
    "iterable": "Iterable",
    "promise": "Promise",
}

_VISIBILITY = {
    "public": "public",
    "private": "private",
    "protected": "protected",
    # Nearest match: visible to subclasses only
    "package": "protected",
}

_DEFAULTS = {
    "boolean": "false",
    "numeric": "0",
    "character": '" "',
    "text": '""',
    "other": "null as any",
}


class TypeScriptGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 2

    def supports_packages(self) -> bool:
        return True

    def generate_header(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_footer(self, diagram: ClassDiagram) -> str:
        return ""

    def generate_package_start(self, name: str) -> str:
        return f"export namespace {name} {{\n"

    def generate_package_end(self, name: str) -> str:
        return "}\n\n"

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        interfaces = find_implemented_interfaces(cls, diagram)

        head = "export abstract class " if cls.is_abstract else "export class "
        head += cls.name + _generics(cls.generics)
        if parent is not None:
            head += f" extends {parent.name}"
        if interfaces:
            head += " implements " + ", ".join(i.name for i in interfaces)

        blocks: list[str] = []
        if cls.attributes:
            blocks.append("\n".join(self._field(a) for a in cls.attributes))

        if cls.constructors:
            blocks.append(self._constructors(cls.constructors, parent is not None))
        elif not cls.is_abstract:
            default = Method(name=cls.name, return_type=None)
            blocks.append(self._constructors([default], parent is not None))

        blocks.extend(self._method(m) for m in cls.methods)
        return self._block(cls, diagram, f"{cls.name} class", head, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        head = f"export interface {iface.name}{_generics(iface.generics)}"
        parents = find_extended_interfaces(iface, diagram)
        if parents:
            head += " extends " + ", ".join(p.name for p in parents)
        blocks = [self._signature(m, in_interface=True) + ";" for m in iface.methods]
        return self._block(iface, diagram, f"{iface.name} interface", head, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        blocks = []
        if enum.values:
            blocks.append("\n".join(f"{v} = {i}," for i, v in enumerate(enum.values)))
        head = f"export enum {enum.name}"
        return self._block(enum, diagram, f"{enum.name} enum", head, blocks)

    # -- members -----------------------------------------------------------

    def _field(self, attr: Attribute) -> str:
        tokens = [_VISIBILITY.get(attr.visibility, "public")]
        if attr.is_static:
            tokens.append("static")
        if attr.is_final:
            tokens.append("readonly")
        tokens.append(f"{attr.name}: {self.map_type(attr.type)};")
        return " ".join(tokens)

    def _constructors(self, ctors: list[Method], has_parent: bool) -> str:
        lines: list[str] = []
        if len(ctors) > 1:
            for ctor in ctors:
                visibility = _VISIBILITY.get(ctor.visibility, "public")
                lines.append(f"{visibility} constructor({self._params(ctor.parameters)});")
            head = "public constructor(...args: any[])"
        else:
            visibility = _VISIBILITY.get(ctors[0].visibility, "public")
            head = f"{visibility} constructor({self._params(ctors[0].parameters)})"

        body = ["super();"] if has_parent else []
        body.append("// TODO: Implement constructor")
        lines.append(f"{head} {{\n{self._indent(_lines(body))}\n}}")
        return _lines(lines)

    def _method(self, method: Method) -> str:
        if method.is_abstract:
            return self._signature(method) + ";"
        body = ["// TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {_DEFAULTS.get(default_kind(method.return_type), 'null as any')};")
        return f"{self._signature(method)} {{\n{self._indent(_lines(body))}\n}}"

    def _signature(self, method: Method, in_interface: bool = False) -> str:
        tokens = [] if in_interface else [_VISIBILITY.get(method.visibility, "public")]
        if method.is_abstract and not in_interface:
            tokens.append("abstract")
        if method.is_static and not in_interface:
            tokens.append("static")
        params = self._params(method.parameters)
        tokens.append(f"{method.name}({params}): {self.map_type(method.return_type)}")
        return " ".join(tokens)

    def _params(self, params: list[Parameter]) -> str:
        return ", ".join(f"{p.name}: {self.map_type(p.type)}" for p in params)

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "void"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
            return f"{base}<{', '.join('any' for _ in type_ref.args)}>"
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
        lines = [f"/** {summary} */", head + " {"]
        if blocks:
            lines.append(self._indent("\n\n".join(blocks)))
        lines.append("}")
        text = _lines(lines)
        if package_of(entity, diagram) is not None:
            text = self._indent(text)
        return text + "\n\n"


def _generics(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)
