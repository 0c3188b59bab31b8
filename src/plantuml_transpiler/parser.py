from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .types import (
    Attribute,
    ClassDef,
    ClassDiagram,
    Entity,
    EnumDef,
    InterfaceDef,
    Method,
    Parameter,
    Relationship,
    RelationshipType,
    SkippedLine,
    TypeRef,
    Visibility,
)

logger = logging.getLogger(__name__)

# ============================================================================
# PlantUML class diagram parser
#
# Best-effort, line-oriented parser. Lines that match no rule are dropped
# (and reported through the optional `skipped` list); it never raises on
# malformed diagram text.
#
# Supported syntax:
#   package "com.shop" { ... }        package com.shop { ... }
#   abstract class Shape<T> { ... }   abstract Shape
#   class Dog extends Animal implements Pet { ... }
#   interface Repository<T> { ... }   enum Color { RED, GREEN }
#   -id: int                          +{static} {final} MAX: int
#   +getName(): String                +User(id: int, name: String)
#   {abstract} #area(): double        ~tags: Map<String, List<String>>
#   Child <|-- Parent     Impl <|.. Iface     A --> B     A o--> B
#   A *--> B              A ..> B             (and the reversed spellings)
#   A "owns" --> B        A --> B : uses
# ============================================================================

_VISIBILITY: dict[str, Visibility] = {
    "+": "public",
    "-": "private",
    "#": "protected",
    "~": "package",
}

_MODIFIERS = ("static", "final", "abstract", "classifier", "field", "method")

# Modifier tags are the only braces that are not structural
_MODIFIER_RE = re.compile(r"\{(" + "|".join(_MODIFIERS) + r")\}")
_FRAGMENT_RE = re.compile(_MODIFIER_RE.pattern + r"|[{}]|[^{}]+")

_PACKAGE_RE = re.compile(
    r'^(?:package|namespace)\s+(?:"(?P<quoted>[^"]+)"|(?P<name>[^\s{"<]+))'
    r"(?:\s+as\s+\w+)?(?:\s*<<[^>]*>>)?\s*(?P<brace>\{)?$"
)

_ENTITY_RE = re.compile(
    r"^(?:(?P<abstract>abstract)\s+(?P<abstract_class>class\s+)?|(?P<kind>class|interface|enum)\s+)"
    r"(?P<name>\w+)\s*(?:<(?P<generics>[^>]*)>)?(?P<rest>.*)$"
)
_EXTENDS_RE = re.compile(r"\bextends\s+([\w.]+(?:<[^>]*>)?(?:\s*,\s*[\w.]+(?:<[^>]*>)?)*)")
_IMPLEMENTS_RE = re.compile(r"\bimplements\s+([\w.]+(?:<[^>]*>)?(?:\s*,\s*[\w.]+(?:<[^>]*>)?)*)")

# name(params) [: ReturnType]   or   ReturnType name(params)
_METHOD_RE = re.compile(
    r"^(?:(?P<prefix>[\w.]+(?:<.*>)?(?:\[\])*)\s+)?"
    r"(?P<name>\w+)\s*\((?P<params>.*)\)\s*(?::\s*(?P<ret>.+))?$"
)
# name [: Type]   or   Type name
_ATTRIBUTE_RE = re.compile(r"^(?P<name>\w+)\s*(?::\s*(?P<type>.+))?$")
_TYPED_ATTRIBUTE_RE = re.compile(r"^(?P<type>[\w.]+(?:<.*>)?(?:\[\])*)\s+(?P<name>\w+)$")

_ENUM_VALUE_RE = re.compile(r"^\w+$")

_QUOTED_RE = re.compile(r'"([^"]*)"')
# `-up->`, `.up.>`; a dotted hint must follow the arrow head or a space so
# qualified names like `com.d.Order` stay intact
_DIRECTION_HINT_RE = re.compile(
    r"(?:(?<=-)|(?<=[\s|<*]\.)|(?<=[\s|<*]\.\.))"
    r"(?:up|down|left|right|u|d|l|r)(?=[-.])"
)
_STYLE_HINT_RE = re.compile(r"(?<=[-.])\[[^\]]*\](?=[-.])")
_RELATIONSHIP_RE = re.compile(
    r"^(?P<left>[\w.]+)\s*"
    r"(?P<head><\||<|\*|(?<![\w.])o)?"
    r"(?P<line>-+|\.+)"
    r"(?P<tail>\|>|>|\*|o(?![\w.]))?"
    r"\s*(?P<right>[\w.]+)$"
)

# (head, line style, tail) -> (type, written right-to-left)
# A right-to-left arrow stores its right operand as the canonical source.
_ARROWS: dict[tuple[str, str, str], tuple[RelationshipType, bool]] = {
    ("<|", "-", ""): ("inheritance", False),
    ("", "-", "|>"): ("inheritance", True),
    ("<|", ".", ""): ("implementation", False),
    ("", ".", "|>"): ("implementation", True),
    ("o", "-", ">"): ("aggregation", False),
    ("o", "-", ""): ("aggregation", False),
    ("<", "-", "o"): ("aggregation", True),
    ("", "-", "o"): ("aggregation", True),
    ("*", "-", ">"): ("composition", False),
    ("*", "-", ""): ("composition", False),
    ("<", "-", "*"): ("composition", True),
    ("", "-", "*"): ("composition", True),
    ("", ".", ">"): ("dependency", False),
    ("<", ".", ""): ("dependency", True),
    ("", "-", ">"): ("association", False),
    ("", "-", ""): ("association", False),
    ("<", "-", ""): ("association", True),
}


@dataclass(slots=True)
class _ParserState:
    """Cursor threaded through the fragment loop.

    Package blocks and entity bodies are tracked separately so a lone "}"
    is attributed to the block that is actually open.
    """

    # Open non-entity blocks, innermost last. None marks a block we do not
    # model (e.g. `together { ... }`) whose "}" must still be consumed.
    blocks: list[str | None] = field(default_factory=list)
    # Package declared without braces; current until the next package line
    loose_package: str | None = None
    entity: Entity | None = None
    in_entity: bool = False
    entity_depth: int = 0
    # Header seen without "{" -- a lone "{" on the next fragment opens it
    pending: Entity | None = None
    pending_package: str | None = None

    @property
    def current_package(self) -> str | None:
        if self.loose_package is not None:
            return self.loose_package
        for name in reversed(self.blocks):
            if name is not None:
                return name
        return None


def parse_plantuml(
    text: str,
    skipped: list[SkippedLine] | None = None,
) -> ClassDiagram:
    """Parse PlantUML class diagram text into a ClassDiagram.

    Args:
        text: Diagram source. ``@startuml``/``@enduml`` markers are optional.
        skipped: If given, receives one SkippedLine per fragment that did
            not contribute to the model.
    """
    diagram = ClassDiagram()
    state = _ParserState()

    for line_number, fragment in _fragments(text):
        reason = _process_fragment(fragment, state, diagram)
        if reason is not None:
            logger.debug("Skipping line %d (%s): %r", line_number, reason, fragment)
            if skipped is not None:
                skipped.append(SkippedLine(line_number=line_number, text=fragment, reason=reason))

    logger.debug(
        "Parsed %d classes, %d interfaces, %d enums, %d relationships",
        len(diagram.classes),
        len(diagram.interfaces),
        len(diagram.enums),
        len(diagram.relationships),
    )
    return diagram


# ============================================================================
# Sanitizing
# ============================================================================


def _sanitize(text: str) -> list[str]:
    """Strip markers and comments, keeping one entry per original line."""
    # Block comments are replaced by their line breaks so numbering holds
    text = re.sub(
        r"/\*.*?\*/|/'.*?'/",
        lambda m: "\n" * m.group(0).count("\n"),
        text,
        flags=re.DOTALL,
    )
    lines: list[str] = []
    for raw in text.splitlines():
        stripped = _strip_line_comment(raw).strip()
        if re.match(r"^@(?:start|end)uml\b", stripped):
            lines.append("")
        else:
            lines.append(stripped)
    return lines


def _strip_line_comment(line: str) -> str:
    """Drop everything from the first `'` outside a double-quoted string."""
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "'" and not in_quotes:
            return line[:index]
    return line


def _split_braces(line: str) -> list[str]:
    """Split a line so structural braces end or stand alone in a fragment.

    ``package "p" { class A { } }`` -> ``package "p" {``, ``class A {``,
    ``}``, ``}``. Modifier tags like ``{static}`` are kept in place.
    """
    fragments: list[str] = []
    buf = ""
    for token in (m.group(0) for m in _FRAGMENT_RE.finditer(line)):
        if token == "{":
            fragments.append(buf + "{")
            buf = ""
        elif token == "}":
            fragments.append(buf)
            fragments.append("}")
            buf = ""
        else:
            buf += token
    fragments.append(buf)
    return [f.strip() for f in fragments if f.strip()]


def _fragments(text: str) -> list[tuple[int, str]]:
    result: list[tuple[int, str]] = []
    for index, line in enumerate(_sanitize(text), start=1):
        if not line:
            continue
        for fragment in _split_braces(line):
            result.append((index, fragment))
    return result


# ============================================================================
# State machine
# ============================================================================


def _process_fragment(
    line: str,
    state: _ParserState,
    diagram: ClassDiagram,
) -> str | None:
    """Apply the first matching rule. Returns a skip reason, or None."""
    if state.pending is not None:
        entity = state.pending
        state.pending = None
        if line == "{":
            _enter_entity(state, entity, opened=True)
            return None
    if state.pending_package is not None:
        name = state.pending_package
        state.pending_package = None
        if line == "{":
            state.loose_package = None
            state.blocks.append(name)
            return None

    # --- Package start ---
    package_match = _PACKAGE_RE.match(line)
    if package_match:
        name = (package_match.group("quoted") or package_match.group("name")).strip()
        # Re-opening a package keeps the members already collected
        diagram.packages.setdefault(name, [])
        if package_match.group("brace"):
            state.loose_package = None
            state.blocks.append(name)
        else:
            state.loose_package = name
            state.pending_package = name
        return None

    # --- Closing brace outside an entity body ---
    if line == "}" and not state.in_entity:
        if not state.blocks:
            return "unbalanced closing brace"
        if state.blocks.pop() is not None:
            state.loose_package = None
        return None

    # --- Entity start ---
    entity_match = _ENTITY_RE.match(line)
    if entity_match and state.in_entity and not (
        entity_match.group("kind") or entity_match.group("abstract_class")
    ):
        # `abstract area(): double` inside a body is a member
        entity_match = None
    if entity_match:
        entity = _create_entity(entity_match, state, diagram)
        opened = line.endswith("{")
        if opened:
            _enter_entity(state, entity, opened=True)
        else:
            _leave_entity(state)
            state.pending = entity
        return None

    # --- Entity end ---
    if line == "}" and state.in_entity:
        if state.entity_depth > 0:
            state.entity_depth -= 1
        if state.entity_depth == 0:
            _leave_entity(state)
        return None

    # --- Member or enum value ---
    if state.in_entity and state.entity is not None:
        return _process_member_line(line, state.entity, state)

    # --- Relationship ---
    relationship = parse_relationship(line)
    if relationship is not None:
        diagram.relationships.append(relationship)
        return None

    if line.endswith("{"):
        # Unmodelled block (together, skinparam, ...): swallow its "}"
        state.blocks.append(None)
        return "unsupported block"
    return "unrecognized line"


def _enter_entity(state: _ParserState, entity: Entity, opened: bool) -> None:
    state.entity = entity
    state.in_entity = True
    state.entity_depth = 1 if opened else 0


def _leave_entity(state: _ParserState) -> None:
    state.entity = None
    state.in_entity = False
    state.entity_depth = 0


def _create_entity(
    match: re.Match[str],
    state: _ParserState,
    diagram: ClassDiagram,
) -> Entity:
    """Build and register the entity described by a header line."""
    name = match.group("name")
    kind = match.group("kind") or "class"
    generics = [g.strip() for g in (match.group("generics") or "").split(",") if g.strip()]
    package = state.current_package

    entity: Entity
    if kind == "interface":
        entity = InterfaceDef(name=name, package_name=package, generics=generics)
        diagram.interfaces.append(entity)
    elif kind == "enum":
        entity = EnumDef(name=name, package_name=package)
        diagram.enums.append(entity)
    else:
        entity = ClassDef(
            name=name,
            is_abstract=match.group("abstract") is not None,
            package_name=package,
            generics=generics,
        )
        diagram.classes.append(entity)

    if package is not None:
        diagram.packages.setdefault(package, []).append(name)

    # Header clauses: `extends A` / `implements B, C`
    rest = match.group("rest")
    extends_match = _EXTENDS_RE.search(rest)
    if extends_match and not isinstance(entity, EnumDef):
        for parent in _split_top_level(extends_match.group(1)):
            diagram.relationships.append(
                Relationship(source=name, target=_strip_generics(parent), type="inheritance")
            )
    implements_match = _IMPLEMENTS_RE.search(rest)
    if implements_match and isinstance(entity, ClassDef):
        for iface in _split_top_level(implements_match.group(1)):
            diagram.relationships.append(
                Relationship(source=name, target=_strip_generics(iface), type="implementation")
            )
    return entity


def _process_member_line(line: str, entity: Entity, state: _ParserState) -> str | None:
    text = line
    if text.endswith("{"):
        # A member that opens its own block, e.g. `+run() {`
        state.entity_depth += 1
        text = text[:-1].strip()
        if not text:
            return None

    if isinstance(entity, EnumDef):
        if text[0] in _VISIBILITY or _MODIFIER_RE.search(text) or "(" in text:
            return "enum members are not supported"
        values = [v.strip() for v in text.split(",") if v.strip()]
        if not values or not all(_ENUM_VALUE_RE.match(v) for v in values):
            return "unrecognized enum value"
        entity.values.extend(values)
        return None

    if parse_member(text, entity):
        return None
    return "unrecognized member"


# ============================================================================
# Members
# ============================================================================


def parse_member(line: str, entity: Entity) -> bool:
    """Parse one member line and attach it to ``entity``.

    Constructors land in ``entity.constructors``, methods in
    ``entity.methods`` and attributes in ``entity.attributes``. Returns
    False when the line is not a member ``entity`` can hold.
    """
    modifiers = set(_MODIFIER_RE.findall(line))
    clean = _MODIFIER_RE.sub(" ", line).strip()
    clean = re.sub(r"\s*\{\s*$", "", clean).rstrip(";").strip()
    if not clean:
        return False

    visibility: Visibility = "public"
    if clean[0] in _VISIBILITY:
        visibility = _VISIBILITY[clean[0]]
        clean = clean[1:].strip()
    # Java-style keywords: `abstract double area()`
    keyword, _, tail = clean.partition(" ")
    while keyword in ("abstract", "static", "final") and tail.strip():
        modifiers.add(keyword)
        clean = tail.strip()
        keyword, _, tail = clean.partition(" ")
    if not clean:
        return False

    is_static = "static" in modifiers or "classifier" in modifiers

    method_match = None if "field" in modifiers else _METHOD_RE.match(clean)
    if method_match:
        name = method_match.group("name")
        parameters = parse_parameters(method_match.group("params"))
        ret_text = method_match.group("ret") or method_match.group("prefix")

        if ret_text is None and isinstance(entity, ClassDef) and name == entity.name:
            entity.constructors.append(
                Method(name=name, return_type=None, parameters=parameters, visibility=visibility)
            )
            return True
        if isinstance(entity, EnumDef):
            return False

        entity.methods.append(
            Method(
                name=name,
                return_type=parse_type(ret_text) if ret_text else TypeRef("void"),
                parameters=parameters,
                visibility=visibility,
                is_static=is_static,
                is_abstract="abstract" in modifiers,
            )
        )
        return True

    attr_match = _ATTRIBUTE_RE.match(clean)
    name = type_text = None
    if attr_match:
        name, type_text = attr_match.group("name"), attr_match.group("type")
    else:
        typed_match = _TYPED_ATTRIBUTE_RE.match(clean)
        if typed_match:
            name, type_text = typed_match.group("name"), typed_match.group("type")
    if name is None:
        return False

    type_ref = parse_type(type_text) if type_text and type_text.strip() else TypeRef("Object")

    if "method" in modifiers and not isinstance(entity, EnumDef):
        # `{method}` forces a parameterless method
        entity.methods.append(
            Method(
                name=name,
                return_type=type_ref if type_text else TypeRef("void"),
                visibility=visibility,
                is_static=is_static,
                is_abstract="abstract" in modifiers,
            )
        )
        return True

    if not isinstance(entity, ClassDef):
        return False

    entity.attributes.append(
        Attribute(
            name=name,
            type=type_ref,
            visibility=visibility,
            is_static=is_static,
            is_final="final" in modifiers,
        )
    )
    return True


def parse_parameters(params: str) -> list[Parameter]:
    """Parse ``a: Map<String, List<Integer>>, b: int`` into Parameters.

    Splits on top-level commas only. ``name: Type`` and ``Type name`` are
    both accepted; a missing type becomes ``Object``.
    """
    if not params or not params.strip():
        return []

    result: list[Parameter] = []
    for token in _split_top_level(params):
        name, sep, type_text = token.partition(":")
        name = name.strip()
        type_text = type_text.strip()
        if not sep and " " in name:
            # Java style: `int count`
            type_text, _, name = name.rpartition(" ")
            type_text = type_text.strip()
        if not name:
            continue
        result.append(
            Parameter(name=name, type=parse_type(type_text) if type_text else TypeRef("Object"))
        )
    return result


def parse_type(text: str) -> TypeRef:
    """Parse a type expression such as ``Map<String, List<Integer>>``.

    Total: anything that does not parse as ``Base<Arg, ...>`` becomes a
    simple TypeRef holding the trimmed text.
    """
    raw = text.strip()
    if "<" not in raw or not raw.endswith(">"):
        return TypeRef(raw)

    open_at = raw.index("<")
    base = raw[:open_at].strip()
    inner = raw[open_at + 1 : -1]
    if not base or not _balanced(inner) or inner.strip().endswith(","):
        return TypeRef(raw)

    parts = _split_top_level(inner)
    if not parts or any(not p for p in parts):
        return TypeRef(raw)
    return TypeRef(base, tuple(parse_type(p) for p in parts))


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside angle brackets."""
    parts: list[str] = []
    buf: list[str] = []
    depth = 0
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(buf).strip())
            buf = []
            continue
        buf.append(char)
    if "".join(buf).strip():
        parts.append("".join(buf).strip())
    return parts


def _balanced(text: str) -> bool:
    depth = 0
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _strip_generics(name: str) -> str:
    return name.split("<", 1)[0].strip()


# ============================================================================
# Relationships
# ============================================================================


def parse_relationship(line: str) -> Relationship | None:
    """Parse a relationship line into canonical (source, target, type).

    Reversed spellings normalize to the same direction, so
    ``Child <|-- Parent`` and ``Parent --|> Child`` both yield
    source=Child, target=Parent.
    """
    if "[hidden]" in line:
        # Layout-only link
        return None

    label: str | None = None
    quoted = _QUOTED_RE.search(line)
    if quoted and quoted.group(1).strip():
        label = quoted.group(1).strip()
    # Remaining quoted strings are cardinalities
    line = _QUOTED_RE.sub(" ", line)

    line, sep, colon_label = line.partition(":")
    if label is None and sep and colon_label.strip():
        label = colon_label.strip()

    line = _STYLE_HINT_RE.sub("", line)
    line = _DIRECTION_HINT_RE.sub("", line)

    match = _RELATIONSHIP_RE.match(line.strip())
    if not match:
        return None

    key = (match.group("head") or "", match.group("line")[0], match.group("tail") or "")
    arrow = _ARROWS.get(key)
    if arrow is None:
        return None

    rel_type, right_to_left = arrow
    left, right = match.group("left"), match.group("right")
    if right_to_left:
        left, right = right, left
    return Relationship(source=left, target=right, type=rel_type, label=label)
