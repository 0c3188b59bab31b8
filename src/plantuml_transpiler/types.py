from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

# ============================================================================
# Intermediate model -- logical structure recovered from PlantUML text
#
# Plain records with no behavior. The parser builds one ClassDiagram per
# call; generators only read it. Relationships refer to entities by name and
# are resolved lazily by the generator framework.
# ============================================================================

Visibility = Literal["public", "private", "protected", "package"]

RelationshipType = Literal[
    "inheritance",     # Child <|-- Parent   /  Parent --|> Child
    "implementation",  # Impl <|.. Iface     /  Iface ..|> Impl
    "association",     # A --> B             /  B <-- A
    "aggregation",     # Whole o--> Part     /  Part <--o Whole
    "composition",     # Whole *--> Part     /  Part <--* Whole
    "dependency",      # User ..> Service    /  Service <.. User
]


@dataclass(frozen=True, slots=True)
class TypeRef:
    """A type expression, parsed once when the diagram is read.

    A TypeRef without ``args`` is a simple named type (``int``, ``User``).
    With ``args`` it is a generic type: ``name`` is the base container and
    ``args`` are its type arguments, recursively of the same shape.
    """

    name: str
    args: tuple[TypeRef, ...] = ()

    @property
    def is_generic(self) -> bool:
        return len(self.args) > 0

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(str(a) for a in self.args)}>"


@dataclass(slots=True)
class Parameter:
    name: str
    type: TypeRef


@dataclass(slots=True)
class Attribute:
    """A field declared on a class."""

    name: str
    type: TypeRef
    visibility: Visibility = "public"
    is_static: bool = False
    is_final: bool = False


@dataclass(slots=True)
class Method:
    """A method or constructor.

    Constructors share this shape; they carry no return type.
    """

    name: str
    # None designates a constructor
    return_type: TypeRef | None
    parameters: list[Parameter] = field(default_factory=list)
    visibility: Visibility = "public"
    is_static: bool = False
    is_abstract: bool = False

    @property
    def is_constructor(self) -> bool:
        return self.return_type is None


@dataclass(slots=True)
class ClassDef:
    name: str
    is_abstract: bool = False
    package_name: str | None = None
    attributes: list[Attribute] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    # Stored apart from methods, same record shape
    constructors: list[Method] = field(default_factory=list)
    # Generic parameter names, e.g. ["K", "V"]
    generics: list[str] = field(default_factory=list)


@dataclass(slots=True)
class InterfaceDef:
    name: str
    package_name: str | None = None
    methods: list[Method] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)


@dataclass(slots=True)
class EnumDef:
    name: str
    package_name: str | None = None
    values: list[str] = field(default_factory=list)


Entity = Union[ClassDef, InterfaceDef, EnumDef]


@dataclass(slots=True)
class Relationship:
    """A directed, typed edge between two entity names.

    Always stored in canonical direction, whatever arrow spelling was used:
    source is the child / implementor / owner / dependent side.
    """

    source: str
    target: str
    type: RelationshipType
    label: str | None = None


@dataclass(slots=True)
class ClassDiagram:
    """Parsed class diagram -- everything one generator call consumes."""

    classes: list[ClassDef] = field(default_factory=list)
    interfaces: list[InterfaceDef] = field(default_factory=list)
    enums: list[EnumDef] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    # Package name -> entity names, both in declaration order
    packages: dict[str, list[str]] = field(default_factory=dict)


# ============================================================================
# Parser diagnostics
# ============================================================================


@dataclass(slots=True)
class SkippedLine:
    """A source line (or brace-split fragment of one) the parser ignored."""

    # 1-based line number in the original text
    line_number: int
    text: str
    reason: str


# ============================================================================
# Generator options -- user-facing configuration
# ============================================================================


@dataclass(slots=True)
class GeneratorOptions:
    # Spaces per indent level. None keeps the generator's own default.
    indent_size: int | None = None
    # Emit supertypes before subtypes within each emitted group
    order_by_inheritance: bool = False
