"""plantuml-transpiler — Turn PlantUML class diagrams into source code skeletons."""

from __future__ import annotations

import logging

from .types import (
    Attribute,
    ClassDef,
    ClassDiagram,
    EnumDef,
    GeneratorOptions,
    InterfaceDef,
    Method,
    Parameter,
    Relationship,
    SkippedLine,
    TypeRef,
)
from .parser import parse_plantuml, parse_type
from .ordering import order_by_inheritance
from .generators import (
    CodeGenerator,
    generate,
    get_generator,
    get_supported_languages,
)
from .generators.base import resolve_options

__all__ = [
    "transpile",
    "parse_plantuml",
    "parse_type",
    "generate",
    "get_generator",
    "get_supported_languages",
    "order_by_inheritance",
    "CodeGenerator",
    "GeneratorOptions",
    "ClassDiagram",
    "ClassDef",
    "InterfaceDef",
    "EnumDef",
    "Attribute",
    "Method",
    "Parameter",
    "Relationship",
    "SkippedLine",
    "TypeRef",
]

logger = logging.getLogger(__name__)


def transpile(
    text: str,
    language: str,
    options: GeneratorOptions | dict | None = None,
) -> str:
    """Transpile PlantUML class diagram text to ``language`` source code.

    ``options`` may be a GeneratorOptions or a dict with snake_case or
    camelCase keys (``indent_size`` / ``indentSize``, ``order_by_inheritance``
    / ``orderByInheritance``).

    Raises ValueError for blank input or an unknown language key.
    """
    if not text or not text.strip():
        raise ValueError("PlantUML source cannot be empty")

    opts = resolve_options(options)
    generator = get_generator(language, opts)

    diagram = parse_plantuml(text)
    logger.debug(
        "Parsed %d classes, %d interfaces, %d enums, %d relationships, %d packages",
        len(diagram.classes),
        len(diagram.interfaces),
        len(diagram.enums),
        len(diagram.relationships),
        len(diagram.packages),
    )
    return generate(diagram, generator, opts)
