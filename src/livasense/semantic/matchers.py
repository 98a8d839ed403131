"""Line-level declaration matchers.

Every matcher takes one trimmed source line and returns what it declares, or
None. Offsets in the returned ``Declaration`` are relative to that trimmed
line; the extractor adds the line's indentation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .symbols import SymbolKind

IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
TYPE_NAME = r"[A-Za-z0-9_\[\]?]+"

COMMENT_PREFIXES = ("//", "/*")

# Block heads always begin with an uppercase identifier
CLASS_HEAD_RE = re.compile(
    r"^([A-Z][A-Za-z0-9_]*)\s*:\s*([A-Z][A-Za-z0-9_]*(?:\s*,\s*[A-Za-z_][A-Za-z0-9_]*)*)\s*\{"
)
CONTAINER_HEAD_RE = re.compile(r"^([A-Z][A-Za-z0-9_]*)\s*\{")

CONSTRUCTOR_RE = re.compile(r"^(constructor)\s*\(([^)]*)\)\s*(=>|\{)")
IMPLEMENTATION_RE = re.compile(
    rf"^({IDENT})\s*\(([^)]*)\)\s*(?::\s*({TYPE_NAME})\s*)?(=>|\{{)"
)
SIGNATURE_RE = re.compile(rf"^({IDENT})\s*\((.*?)\)\s*(?::\s*({TYPE_NAME}))?$")
FIELD_RE = re.compile(rf"^({IDENT})\s*:\s*({TYPE_NAME})")
CONSTANT_RE = re.compile(r"^const\s+([A-Z_][A-Z0-9_]*)\s*=\s*(.+)$")
VARIABLE_RE = re.compile(rf"^let\s+({IDENT})(?:\s*,\s*({IDENT}))?\s*=")

# Statement keywords that share the ``name(...) {`` shape
CONTROL_KEYWORDS = frozenset(
    {"if", "else", "while", "for", "switch", "match", "catch", "return"}
)


@dataclass(frozen=True)
class Declaration:
    """A declaration recognised on one line.

    Attributes:
        kind: Declared kind. Container heads without an implements clause
            are reported as INTERFACE until the block closes.
        name: Declared identifier.
        name_start: Offset of the name in the trimmed line.
        signature: Raw parameter text (callables only).
        declared_type: Return or field type, when written.
        body: "=>" or "{" for implementations, None for everything else.
        brace_start: Offset of the opening brace for block bodies and heads.
        value: Initialiser text (constants only).
        implements: Interface names from a class head.
    """

    kind: SymbolKind
    name: str
    name_start: int = 0
    signature: str = ""
    declared_type: str | None = None
    body: str | None = None
    brace_start: int | None = None
    value: str = ""
    implements: tuple[str, ...] = ()


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_PREFIXES)


def match_container_head(line: str) -> Declaration | None:
    """Match ``Name : I1, I2 {`` (a class) or ``Name {`` (tentatively an interface)."""
    m = CLASS_HEAD_RE.match(line)
    if m:
        names = tuple(n.strip() for n in m.group(2).split(",") if n.strip())
        return Declaration(
            kind=SymbolKind.CLASS,
            name=m.group(1),
            brace_start=m.end() - 1,
            implements=names,
        )

    m = CONTAINER_HEAD_RE.match(line)
    if m:
        return Declaration(
            kind=SymbolKind.INTERFACE,
            name=m.group(1),
            brace_start=m.end() - 1,
        )
    return None


def match_constructor(line: str) -> Declaration | None:
    m = CONSTRUCTOR_RE.match(line)
    if not m:
        return None
    body = m.group(3)
    return Declaration(
        kind=SymbolKind.CONSTRUCTOR,
        name="constructor",
        signature=m.group(2).strip(),
        body=body,
        brace_start=m.end() - 1 if body == "{" else None,
    )


def match_implementation(line: str) -> Declaration | None:
    """Match ``name(params) => expr`` or ``name(params): Type {`` and friends."""
    m = IMPLEMENTATION_RE.match(line)
    if not m or m.group(1) == "constructor":
        return None
    body = m.group(4)
    return Declaration(
        kind=SymbolKind.METHOD,
        name=m.group(1),
        signature=m.group(2).strip(),
        declared_type=m.group(3),
        body=body,
        brace_start=m.end() - 1 if body == "{" else None,
    )


def match_signature(line: str) -> Declaration | None:
    """Match a body-less ``name(params): Type`` interface method."""
    if "=>" in line or "{" in line:
        return None
    m = SIGNATURE_RE.match(line)
    if not m or m.group(1) == "constructor":
        return None
    return Declaration(
        kind=SymbolKind.METHOD,
        name=m.group(1),
        signature=m.group(2).strip(),
        declared_type=m.group(3) or None,
    )


def match_field(line: str) -> Declaration | None:
    if "(" in line:
        return None
    m = FIELD_RE.match(line)
    if not m:
        return None
    return Declaration(kind=SymbolKind.FIELD, name=m.group(1), declared_type=m.group(2))


def match_member(line: str) -> Declaration | None:
    """Match a line directly inside a class or interface body.

    Tried in order: constructor, implemented method, method signature, field.
    """
    for matcher in (match_constructor, match_implementation, match_signature, match_field):
        decl = matcher(line)
        if decl is not None:
            return decl
    return None


def match_function(line: str) -> Declaration | None:
    """Match a top-level function; the caller checks it starts at column 0."""
    decl = match_implementation(line)
    if decl is None or decl.name in CONTROL_KEYWORDS:
        return None
    return Declaration(
        kind=SymbolKind.FUNCTION,
        name=decl.name,
        signature=decl.signature,
        declared_type=decl.declared_type,
        body=decl.body,
        brace_start=decl.brace_start,
    )


def match_constant(line: str) -> Declaration | None:
    m = CONSTANT_RE.match(line)
    if not m:
        return None
    return Declaration(
        kind=SymbolKind.CONSTANT,
        name=m.group(1),
        name_start=m.start(1),
        value=m.group(2).strip(),
    )


def match_variables(line: str) -> list[Declaration]:
    """Match ``let name = ...`` and the error binding ``let value, err = ...``."""
    m = VARIABLE_RE.match(line)
    if not m:
        return []
    found = []
    for group in (1, 2):
        if m.group(group):
            found.append(
                Declaration(
                    kind=SymbolKind.VARIABLE,
                    name=m.group(group),
                    name_start=m.start(group),
                )
            )
    return found
