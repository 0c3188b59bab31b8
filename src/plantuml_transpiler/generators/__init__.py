"""Per-language code generators and the name -> generator table."""

from __future__ import annotations

from ..types import GeneratorOptions
from .base import CodeGenerator, generate, resolve_options
from .csharp import CSharpGenerator
from .java import JavaGenerator
from .javascript import JavaScriptGenerator
from .kotlin import KotlinGenerator
from .python import PythonGenerator
from .ruby import RubyGenerator
from .typescript import TypeScriptGenerator

__all__ = [
    "GENERATORS",
    "CodeGenerator",
    "generate",
    "get_generator",
    "get_supported_languages",
]

GENERATORS = {
    "java": JavaGenerator,
    "csharp": CSharpGenerator,
    "python": PythonGenerator,
    "ruby": RubyGenerator,
    "kotlin": KotlinGenerator,
    "javascript": JavaScriptGenerator,
    "typescript": TypeScriptGenerator,
}


def get_supported_languages() -> list[str]:
    return sorted(GENERATORS)


def get_generator(
    language: str,
    options: GeneratorOptions | dict | None = None,
) -> CodeGenerator:
    """Build the generator for ``language`` (case-insensitive).

    Raises ValueError naming the supported keys when ``language`` is unknown.
    """
    key = language.strip().lower()
    if key not in GENERATORS:
        supported = ", ".join(get_supported_languages())
        raise ValueError(
            f'Unsupported target language: "{language}". Supported languages: {supported}'
        )
    return GENERATORS[key](indent_size=resolve_options(options).indent_size)
