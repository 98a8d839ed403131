"""Structural symbol extraction for Liva source text.

The extractor walks the document one line at a time with at most one open
class or interface. Brace depth inside the open block is tracked per line,
ignoring braces inside string literals; when the depth returns to zero the
block is classified and committed. A block still open at the end of the
document is dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..utils import LineIndex, split_lines
from .matchers import (
    Declaration,
    is_comment,
    match_constant,
    match_container_head,
    match_function,
    match_member,
    match_variables,
)
from .scanner import brace_delta, find_matching_close, split_segments
from .symbols import ContainerSymbol, Span, Symbol, SymbolKind, SymbolModel

log = logging.getLogger(__name__)

CONSTRUCTOR_WORD_RE = re.compile(r"\bconstructor\b")

# Constant values longer than this are shortened in the outline detail
DETAIL_LIMIT = 30


def preview(value: str, limit: int = DETAIL_LIMIT) -> str:
    if len(value) > limit:
        return value[: limit - 3] + "..."
    return value


def _is_signature(decl: Declaration) -> bool:
    return decl.kind == SymbolKind.METHOD and decl.body is None


@dataclass
class _OpenContainer:
    head: Declaration
    line: int
    column: int
    depth: int
    members: list[tuple[Declaration, Symbol]] = field(default_factory=list)
    saw_constructor: bool = False


class StructuralExtractor:
    """Recovers a SymbolModel from the raw text of one document."""

    def __init__(self, text: str, include_variables: bool = False):
        self.text = text
        self.lines = split_lines(text)
        self.index = LineIndex(text)
        self.include_variables = include_variables
        self._symbols: list[Symbol] = []
        self._open: _OpenContainer | None = None

    def extract(self) -> SymbolModel:
        """Scan every line and return the symbols found, in source order."""
        for line_no, raw in enumerate(self.lines):
            line = raw.strip()
            if not line or is_comment(line):
                continue
            indent = len(raw) - len(raw.lstrip())
            if self._open is not None:
                self._container_line(line_no, raw, line, indent)
            else:
                self._top_level_line(line_no, raw, line, indent)

        if self._open is not None:
            log.debug(
                "Dropping unterminated block '%s' opened at line %d",
                self._open.head.name,
                self._open.line + 1,
            )
            self._open = None
        return SymbolModel(list(self._symbols))

    # --- Top level ---

    def _top_level_line(self, line_no: int, raw: str, line: str, indent: int) -> None:
        head = match_container_head(line)
        if head is not None:
            self._open_container(head, line_no, line, indent)
            return

        # Constants count at any indentation, function bodies included
        decl = match_constant(line)
        if decl is not None:
            col = indent + decl.name_start
            self._symbols.append(
                Symbol(
                    kind=SymbolKind.CONSTANT,
                    name=decl.name,
                    span=Span.on_line(line_no, indent, len(raw.rstrip())),
                    selection_span=Span.on_line(line_no, col, col + len(decl.name)),
                    detail=preview(decl.value),
                )
            )
            return

        if indent != 0:
            return

        decl = match_function(line)
        if decl is not None:
            self._symbols.append(self._symbol(decl, line_no, 0, len(raw.rstrip())))
            return

        if self.include_variables:
            for decl in match_variables(line):
                self._symbols.append(self._symbol(decl, line_no, 0, len(raw.rstrip())))

    def _open_container(self, head: Declaration, line_no: int, line: str, indent: int) -> None:
        assert head.brace_start is not None
        self._open = _OpenContainer(
            head=head, line=line_no, column=indent, depth=brace_delta(line)
        )

        # Members written on the head line itself, up to the closing brace if any
        close = find_matching_close(line, head.brace_start)
        body_start = head.brace_start + 1
        body = line[body_start:close] if close is not None else line[body_start:]
        self._note_constructor(body)
        for start, end in split_segments(body):
            segment = body[start:end]
            lead = len(segment) - len(segment.lstrip())
            col = indent + body_start + start + lead
            end_char = indent + body_start + start + len(segment.rstrip())
            self._add_member(segment.strip(), line_no, col, end_char)

        if self._open.depth <= 0:
            end_char = indent + (close + 1 if close is not None else len(line))
            self._close_container(line_no, end_char)

    # --- Inside a container ---

    def _container_line(self, line_no: int, raw: str, line: str, indent: int) -> None:
        current = self._open
        assert current is not None
        self._note_constructor(line)
        if current.depth == 1:
            self._add_member(line, line_no, indent, len(raw.rstrip()))

        current.depth += brace_delta(line)
        if current.depth <= 0:
            self._close_container(line_no, len(raw.rstrip()))

    def _note_constructor(self, text: str) -> None:
        if self._open is not None and CONSTRUCTOR_WORD_RE.search(text):
            self._open.saw_constructor = True

    def _add_member(self, line: str, line_no: int, col: int, end_char: int) -> None:
        assert self._open is not None
        decl = match_member(line)
        if decl is not None:
            self._open.members.append((decl, self._symbol(decl, line_no, col, end_char)))

    def _close_container(self, line_no: int, end_char: int) -> None:
        current = self._open
        assert current is not None
        self._open = None

        head = current.head
        kind = self._classify(current)
        # Interfaces keep only signatures; classes keep everything else
        members = []
        for decl, sym in current.members:
            if _is_signature(decl) == (kind == SymbolKind.INTERFACE):
                members.append(sym)
            elif kind == SymbolKind.INTERFACE:
                log.debug("Interface '%s': ignoring non-signature member '%s'", head.name, decl.name)

        name_col = current.column
        self._symbols.append(
            ContainerSymbol(
                kind=kind,
                name=head.name,
                span=Span(current.line, current.column, line_no, end_char),
                selection_span=Span.on_line(current.line, name_col, name_col + len(head.name)),
                implements=list(head.implements),
                members=members,
            )
        )

    def _classify(self, current: _OpenContainer) -> SymbolKind:
        """Decide whether a closed block is a class or an interface.

        A block with an implements clause is a class. Otherwise it is a
        class only when its body mentions ``constructor``; classes always
        declare one.
        """
        if current.head.kind == SymbolKind.CLASS or current.saw_constructor:
            return SymbolKind.CLASS
        return SymbolKind.INTERFACE

    # --- Symbol construction ---

    def _symbol(self, decl: Declaration, line_no: int, col: int, end_char: int) -> Symbol:
        """Build a symbol for a declaration whose trimmed text starts at ``col``."""
        name_col = col + decl.name_start
        span = Span.on_line(line_no, col, end_char)
        if decl.body == "{" and decl.brace_start is not None:
            open_offset = self.index.offset(line_no, col + decl.brace_start)
            close = find_matching_close(self.text, open_offset)
            if close is None:
                end_line, end_col = self.index.end_of_document()
            else:
                end_line, end_col = self.index.position(close + 1)
            span = Span(line_no, col, end_line, end_col)

        detail = (decl.declared_type or "") if decl.kind == SymbolKind.FIELD else ""
        return Symbol(
            kind=decl.kind,
            name=decl.name,
            span=span,
            selection_span=Span.on_line(line_no, name_col, name_col + len(decl.name)),
            signature=decl.signature,
            declared_type=decl.declared_type,
            detail=detail,
        )


def extract(text: str, include_variables: bool = False) -> SymbolModel:
    """Extract the symbol model of one document."""
    return StructuralExtractor(text, include_variables=include_variables).extract()


class LivaIndexer:
    """Indexer for ``.liva`` documents."""

    def __init__(self, include_variables: bool = False) -> None:
        self.include_variables = include_variables

    def extract(self, text: str) -> SymbolModel:
        return extract(text, include_variables=self.include_variables)
