"""Definition and reference lookup over raw document text.

This module does not consult the SymbolModel: it runs its own
regular expressions, anchored on the identifier being looked up, directly
over the text. It therefore also resolves names the extractor never emits,
such as both names of an error binding ``let value, err = ...``.
"""

from __future__ import annotations

import re

from ..utils import LineIndex, split_lines
from .symbols import Span

WORD_RE = re.compile(r"\w+")

# Coarse test for a line that declares something
DECLARATION_LINE_RE = re.compile(r"^\s*(let|const|fn)\s+")


def _function_patterns(name: str) -> list[re.Pattern[str]]:
    return [
        # name(params) => expr
        re.compile(rf"^\s*({name})\s*\([^)]*\)\s*=>", re.MULTILINE),
        # name(params) {
        re.compile(rf"^\s*({name})\s*\([^)]*\)\s*\{{", re.MULTILINE),
        # name(params): Type {
        re.compile(rf"^\s*({name})\s*\([^)]*\)\s*:\s*\w+\s*\{{", re.MULTILINE),
        # name(params): Type => expr
        re.compile(rf"^\s*({name})\s*\([^)]*\)\s*:\s*\w+\s*=>", re.MULTILINE),
    ]


def _variable_patterns(name: str) -> list[re.Pattern[str]]:
    return [
        re.compile(rf"^\s*let\s+({name})\s*[=,]", re.MULTILINE),
        re.compile(rf"^\s*const\s+({name})\s*=", re.MULTILINE),
        # Error binding, either position: let value, err = ...
        re.compile(rf"^\s*let\s+\w+\s*,\s*({name})\s*=", re.MULTILINE),
        re.compile(rf"^\s*let\s+({name})\s*,\s*\w+\s*=", re.MULTILINE),
    ]


def _class_pattern(name: str) -> re.Pattern[str]:
    # ``Name {`` or ``Name : Iface, ... {``
    return re.compile(rf"^\s*({name})\s*(?::[^{{\n]*)?\{{", re.MULTILINE)


def _spans(text: str, index: LineIndex, pattern: re.Pattern[str], length: int) -> list[Span]:
    spans = []
    for match in pattern.finditer(text):
        line, col = index.position(match.start(1))
        spans.append(Span.on_line(line, col, col + length))
    return spans


def resolve_definition(text: str, identifier: str) -> list[Span]:
    """Find every declaration site of ``identifier``.

    Function shapes are tried first, then variable bindings, then (for names
    starting with an uppercase letter) class heads. Each distinct span is
    reported once, in the order first found.
    """
    if not identifier or not WORD_RE.fullmatch(identifier):
        return []

    name = re.escape(identifier)
    patterns = _function_patterns(name) + _variable_patterns(name)
    if identifier[0].isupper():
        patterns.append(_class_pattern(name))

    index = LineIndex(text)
    found: list[Span] = []
    for pattern in patterns:
        for span in _spans(text, index, pattern, len(identifier)):
            if span not in found:
                found.append(span)
    return found


def resolve_references(text: str, identifier: str, include_declaration: bool = True) -> list[Span]:
    """Find every whole-word occurrence of ``identifier``.

    Args:
        text: Document text.
        identifier: Name to search for.
        include_declaration: When False, drop occurrences on lines that look
            like a ``let``/``const``/``fn`` declaration.
    """
    if not identifier or not WORD_RE.fullmatch(identifier):
        return []

    index = LineIndex(text)
    pattern = re.compile(rf"\b{re.escape(identifier)}\b")
    spans = []
    for match in pattern.finditer(text):
        line, col = index.position(match.start())
        spans.append(Span.on_line(line, col, col + len(identifier)))

    if include_declaration:
        return spans

    lines = split_lines(text)
    return [s for s in spans if not DECLARATION_LINE_RE.match(lines[s.start_line])]


def word_at(text: str, line: int, character: int) -> tuple[str, Span] | None:
    """Return the identifier touching a position, with its span."""
    lines = split_lines(text)
    if not 0 <= line < len(lines):
        return None
    for match in WORD_RE.finditer(lines[line]):
        if match.start() <= character <= match.end():
            return match.group(), Span.on_line(line, match.start(), match.end())
    return None


def find_definition(text: str, line: int, character: int) -> Span | None:
    """Go-to-definition: the first declaration site of the word at a position."""
    word = word_at(text, line, character)
    if word is None:
        return None
    definitions = resolve_definition(text, word[0])
    return definitions[0] if definitions else None


def find_references(
    text: str, line: int, character: int, include_declaration: bool = True
) -> list[Span]:
    """Find-references for the word at a position."""
    word = word_at(text, line, character)
    if word is None:
        return []
    return resolve_references(text, word[0], include_declaration=include_declaration)
