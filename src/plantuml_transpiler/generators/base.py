from __future__ import annotations

import logging
from typing import Literal, Protocol, Union

from ..ordering import order_by_inheritance
from ..types import (
    ClassDef,
    ClassDiagram,
    Entity,
    EnumDef,
    GeneratorOptions,
    InterfaceDef,
    Relationship,
    TypeRef,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Generator framework
#
# A target language is any object that satisfies CodeGenerator. The
# traversal, the relationship lookups and the type helpers are free
# functions shared by every language.
# ============================================================================

DefaultKind = Literal["boolean", "numeric", "character", "text", "void", "other"]

TypeLike = Union[TypeRef, str]


class CodeGenerator(Protocol):
    """Rendering hooks one target language supplies to `generate`."""

    # Spaces per indent level
    indent_size: int

    def supports_packages(self) -> bool: ...

    def generate_header(self, diagram: ClassDiagram) -> str: ...

    def generate_footer(self, diagram: ClassDiagram) -> str: ...

    def generate_package_start(self, name: str) -> str: ...

    def generate_package_end(self, name: str) -> str: ...

    def generate_class(self, cls: ClassDef, diagram: ClassDiagram) -> str: ...

    def generate_interface(self, iface: InterfaceDef, diagram: ClassDiagram) -> str: ...

    def generate_enum(self, enum: EnumDef, diagram: ClassDiagram) -> str: ...


def resolve_options(options: GeneratorOptions | dict | None) -> GeneratorOptions:
    """Accept a GeneratorOptions, a plain dict (snake_case or camelCase) or None."""
    if options is None:
        return GeneratorOptions()
    if isinstance(options, GeneratorOptions):
        return options
    indent_size = options.get("indent_size", options.get("indentSize"))
    order = options.get("order_by_inheritance", options.get("orderByInheritance", False))
    return GeneratorOptions(
        indent_size=int(indent_size) if indent_size is not None else None,
        order_by_inheritance=bool(order),
    )


# ============================================================================
# Traversal
# ============================================================================


def generate(
    diagram: ClassDiagram,
    generator: CodeGenerator,
    options: GeneratorOptions | dict | None = None,
) -> str:
    """Render ``diagram`` with ``generator`` and return the source text.

    With package support, each package is wrapped in the generator's
    package start/end text and its members are emitted in listed order;
    names that resolve to no entity are skipped. Entities listed in no
    package follow, classes first, then interfaces, then enums. Without
    package support every entity is emitted in that grouped order.
    """
    opts = resolve_options(options)
    parts = [generator.generate_header(diagram)]

    if generator.supports_packages():
        packaged: set[str] = set()
        for members in diagram.packages.values():
            packaged.update(members)

        for package_name, members in diagram.packages.items():
            entities: list[Entity] = []
            for name in members:
                entity = find_entity(name, diagram)
                if entity is None:
                    logger.debug("Package %r lists unknown entity %r", package_name, name)
                    continue
                entities.append(entity)
            if opts.order_by_inheritance:
                entities = order_by_inheritance(entities, diagram)

            parts.append(generator.generate_package_start(package_name))
            parts.extend(_render_entity(generator, e, diagram) for e in entities)
            parts.append(generator.generate_package_end(package_name))

        remaining = [e for e in _all_entities(diagram) if e.name not in packaged]
    else:
        remaining = _all_entities(diagram)

    if opts.order_by_inheritance:
        remaining = order_by_inheritance(remaining, diagram)
    parts.extend(_render_entity(generator, e, diagram) for e in remaining)

    parts.append(generator.generate_footer(diagram))
    return "".join(parts)


def _all_entities(diagram: ClassDiagram) -> list[Entity]:
    return [*diagram.classes, *diagram.interfaces, *diagram.enums]


def _render_entity(generator: CodeGenerator, entity: Entity, diagram: ClassDiagram) -> str:
    if isinstance(entity, ClassDef):
        return generator.generate_class(entity, diagram)
    if isinstance(entity, InterfaceDef):
        return generator.generate_interface(entity, diagram)
    return generator.generate_enum(entity, diagram)


# ============================================================================
# Lookups
#
# Relationship targets are plain names; anything that does not resolve is
# left out rather than reported.
# ============================================================================


def find_entity(name: str, diagram: ClassDiagram) -> Entity | None:
    """Resolve a name: classes first, then interfaces, then enums."""
    for group in (diagram.classes, diagram.interfaces, diagram.enums):
        for entity in group:
            if entity.name == name:
                return entity
    return None


def find_parent_class(cls: ClassDef, diagram: ClassDiagram) -> ClassDef | None:
    """The class named by the first inheritance relationship of ``cls``."""
    for rel in diagram.relationships:
        if rel.type == "inheritance" and rel.source == cls.name:
            return next((c for c in diagram.classes if c.name == rel.target), None)
    return None


def find_implemented_interfaces(cls: ClassDef, diagram: ClassDiagram) -> list[InterfaceDef]:
    return _resolve_interfaces(cls.name, "implementation", diagram)


def find_extended_interfaces(iface: InterfaceDef, diagram: ClassDiagram) -> list[InterfaceDef]:
    """Interfaces an interface inherits from (``Sub <|-- Base`` between interfaces)."""
    return _resolve_interfaces(iface.name, "inheritance", diagram)


def _resolve_interfaces(source: str, rel_type: str, diagram: ClassDiagram) -> list[InterfaceDef]:
    by_name = {i.name: i for i in diagram.interfaces}
    result: list[InterfaceDef] = []
    for rel in diagram.relationships:
        if rel.type == rel_type and rel.source == source and rel.target in by_name:
            iface = by_name[rel.target]
            if iface not in result:
                result.append(iface)
    return result


def find_associations(cls: ClassDef, diagram: ClassDiagram) -> list[Relationship]:
    return [
        rel
        for rel in diagram.relationships
        if rel.source == cls.name and rel.type in ("association", "aggregation", "composition")
    ]


def has_subclasses(cls: ClassDef, diagram: ClassDiagram) -> bool:
    return any(
        rel.type == "inheritance" and rel.target == cls.name and rel.source != cls.name
        for rel in diagram.relationships
    )


def package_of(entity: Entity, diagram: ClassDiagram) -> str | None:
    """The package whose member list holds ``entity``, as `generate` sees it."""
    for package_name, members in diagram.packages.items():
        if entity.name in members:
            return package_name
    return None


# ============================================================================
# Text and type helpers
# ============================================================================


def indent(text: str, level: int = 1, size: int = 4) -> str:
    """Prefix every non-empty line of ``text`` with ``level * size`` spaces."""
    pad = " " * (level * size)
    return "\n".join(pad + line if line else line for line in text.split("\n"))


def is_complex_generic_type(type_: TypeLike | None) -> bool:
    if type_ is None:
        return False
    if isinstance(type_, TypeRef):
        return type_.is_generic
    return "<" in type_ and ">" in type_


def extract_base_generic_type(type_: TypeLike) -> str:
    """``Map<String, Integer>`` -> ``Map``. Non-generic types come back unchanged."""
    if isinstance(type_, TypeRef):
        return type_.name if type_.is_generic else str(type_)
    if is_complex_generic_type(type_):
        return type_.split("<", 1)[0].strip()
    return type_


_KINDS: dict[str, DefaultKind] = {
    "boolean": "boolean",
    "bool": "boolean",
    "int": "numeric",
    "integer": "numeric",
    "long": "numeric",
    "short": "numeric",
    "byte": "numeric",
    "float": "numeric",
    "double": "numeric",
    "decimal": "numeric",
    "number": "numeric",
    "bigdecimal": "numeric",
    "biginteger": "numeric",
    "char": "character",
    "character": "character",
    "string": "text",
    "str": "text",
    "text": "text",
    "void": "void",
    "none": "void",
    "unit": "void",
}


def default_kind(type_: TypeLike | None) -> DefaultKind:
    """Classify a source type to pick a placeholder return value."""
    if type_ is None:
        return "void"
    if is_complex_generic_type(type_):
        return "other"
    name = str(type_).strip().lower()
    return _KINDS.get(name, "other")
