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
# JavaScript (CommonJS)
#
# No packages, interfaces or type annotations: interfaces become base classes
# that refuse direct instantiation; types and visibility go to JSDoc.
# ============================================================================

# JSDoc type names
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
    "object": "*",
    "any": "*",
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
}

_VISIBILITY = {
    "public": "public",
    "private": "private",
    "protected": "protected",
    "package": "package",
}

_DEFAULTS = {
    "boolean": "false",
    "numeric": "0",
    "character": "' '",
    "text": "''",
}

_ABSTRACT_BODY = "throw new Error('Method must be implemented by subclass');"


class JavaScriptGenerator:
    def __init__(self, indent_size: int | None = None) -> None:
        self.indent_size = indent_size if indent_size is not None else 2

    def supports_packages(self) -> bool:
        return False

    def generate_header(self, diagram: ClassDiagram) -> str:
        return "// Generated JavaScript code from PlantUML class diagram\n\n"

    def generate_footer(self, diagram: ClassDiagram) -> str:
        names = [e.name for e in (*diagram.classes, *diagram.interfaces, *diagram.enums)]
        if not names:
            return ""
        return f"module.exports = {{ {', '.join(names)} }};\n"

    def generate_package_start(self, name: str) -> str:
        return ""

    def generate_package_end(self, name: str) -> str:
        return ""

    # -- entities ----------------------------------------------------------

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str:
        parent = find_parent_class(cls, diagram)
        doc = [f"{cls.name} class"]
        if cls.is_abstract:
            doc.append("@abstract")
        doc += [f"@template {g}" for g in cls.generics]
        doc += [f"@implements {{{i.name}}}" for i in find_implemented_interfaces(cls, diagram)]

        head = f"class {cls.name}"
        if parent is not None:
            head += f" extends {parent.name}"

        blocks: list[str] = []
        static = [a for a in cls.attributes if a.is_static]
        instance = [a for a in cls.attributes if not a.is_static]
        if static:
            blocks.append("\n".join(f"static {a.name} = {_default(a.type)};" for a in static))

        if cls.constructors:
            blocks.append(self._constructor(cls.constructors, instance, parent is not None))
        elif not cls.is_abstract or instance:
            default = Method(name=cls.name, return_type=None)
            blocks.append(self._constructor([default], instance, parent is not None))

        blocks.extend(self._method(m) for m in cls.methods)
        return self._block(doc, head, blocks)

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str:
        doc = [f"{iface.name} interface", "@interface"]
        doc += [f"@template {g}" for g in iface.generics]

        head = f"class {iface.name}"
        parents = find_extended_interfaces(iface, diagram)
        if parents:
            # Single inheritance: only the first one can be extended
            head += f" extends {parents[0].name}"

        guard = [
            f"if (new.target === {iface.name}) {{",
            self._indent("throw new Error('Interface cannot be instantiated directly');"),
            "}",
        ]
        if parents:
            guard.insert(0, "super();")
        blocks = [f"constructor() {{\n{self._indent(_lines(guard))}\n}}"]
        blocks.extend(self._def(m, [_ABSTRACT_BODY]) for m in iface.methods)
        return self._block(doc, head, blocks)

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str:
        values = "\n".join(f"{v}: {i}," for i, v in enumerate(enum.values))
        lines = ["/**", f" * {enum.name} enum", " * @enum {number}", " */"]
        if values:
            lines.append(f"const {enum.name} = Object.freeze({{\n{self._indent(values)}\n}});")
        else:
            lines.append(f"const {enum.name} = Object.freeze({{}});")
        return _lines(lines) + "\n\n"

    # -- members -----------------------------------------------------------

    def _constructor(self, ctors: list[Method], instance: list[Attribute], has_parent: bool) -> str:
        # One constructor per class; declared parameter lists are merged
        params: list[Parameter] = []
        for ctor in ctors:
            for param in ctor.parameters:
                if all(p.name != param.name for p in params):
                    params.append(param)
        names = {p.name for p in params}

        body = ["super();"] if has_parent else []
        for attr in instance:
            visibility = _VISIBILITY.get(attr.visibility, "public")
            tags = f"@type {{{self.map_type(attr.type)}}}"
            if visibility != "public":
                tags = f"@{visibility} " + tags
            value = attr.name if attr.name in names else _default(attr.type)
            body.append(f"/** {tags} */\nthis.{attr.name} = {value};")
        body.append("// TODO: Implement constructor")

        doc = self._jsdoc([], params, None)
        signature = f"constructor({', '.join(p.name for p in params)})"
        text = f"{signature} {{\n{self._indent(_lines(body))}\n}}"
        return f"{doc}\n{text}" if doc else text

    def _method(self, method: Method) -> str:
        if method.is_abstract:
            return self._def(method, [_ABSTRACT_BODY], ["@abstract"])
        body = ["// TODO: Implement method"]
        if default_kind(method.return_type) != "void":
            body.append(f"return {_default(method.return_type)};")
        return self._def(method, body)

    def _def(self, method: Method, body: list[str], tags: list[str] | None = None) -> str:
        tags = list(tags or [])
        visibility = _VISIBILITY.get(method.visibility, "public")
        if visibility != "public":
            tags.append(f"@{visibility}")
        doc = self._jsdoc(tags, method.parameters, method.return_type)

        prefix = "static " if method.is_static else ""
        params = ", ".join(p.name for p in method.parameters)
        text = f"{prefix}{method.name}({params}) {{\n{self._indent(_lines(body))}\n}}"
        return f"{doc}\n{text}" if doc else text

    def _jsdoc(self, tags: list[str], params: list[Parameter], returns: TypeRef | None) -> str:
        lines = list(tags)
        lines += [f"@param {{{self.map_type(p.type)}}} {p.name}" for p in params]
        if returns is not None and default_kind(returns) != "void":
            lines.append(f"@returns {{{self.map_type(returns)}}}")
        if not lines:
            return ""
        return _lines(["/**"] + [f" * {line}" for line in lines] + [" */"])

    # -- helpers -----------------------------------------------------------

    def map_type(self, type_ref: TypeRef | None) -> str:
        if type_ref is None:
            return "void"
        if type_ref.is_generic:
            base = _CONTAINERS.get(type_ref.name.lower(), type_ref.name)
            return f"{base}<{', '.join('*' for _ in type_ref.args)}>"
        return _TYPES.get(type_ref.name.lower(), type_ref.name)

    def _indent(self, text: str, level: int = 1) -> str:
        return indent(text, level, self.indent_size)

    def _block(self, doc: list[str], head: str, blocks: list[str]) -> str:
        lines = ["/**"] + [f" * {line}" for line in doc] + [" */", head + " {"]
        if blocks:
            lines.append(self._indent("\n\n".join(blocks)))
        lines.append("}")
        return _lines(lines) + "\n\n"


def _default(type_ref: TypeRef | None) -> str:
    return _DEFAULTS.get(default_kind(type_ref), "null")


def _lines(lines: list[str]) -> str:
    return "\n".join(lines)
