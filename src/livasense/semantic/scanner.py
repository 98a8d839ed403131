"""String-aware brace scanning for block boundaries."""

from __future__ import annotations

from typing import Iterator

QUOTE_CHARS = ('"', "'")


def _unquoted_braces(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield (offset, brace) for every brace outside a string literal.

    A string opens on a quote and closes on the same quote character. A
    quote directly preceded by a backslash is escaped; a doubled backslash
    before a quote is not recognised as an escaped backslash.
    """
    quote: str | None = None
    for i in range(start, len(text)):
        ch = text[i]
        if ch in QUOTE_CHARS and (i == 0 or text[i - 1] != "\\"):
            if quote is None:
                quote = ch
            elif ch == quote:
                quote = None
            continue
        if quote is None and ch in "{}":
            yield i, ch


def find_matching_close(text: str, open_index: int) -> int | None:
    """Find the ``}`` that closes the ``{`` at ``open_index``.

    Args:
        text: Source text to scan.
        open_index: Offset of an opening brace.

    Returns:
        Absolute offset of the matching closing brace, or None when the text
        ends before the block closes (or ``open_index`` is not a brace).
    """
    if not 0 <= open_index < len(text) or text[open_index] != "{":
        return None

    depth = 0
    for i, brace in _unquoted_braces(text, open_index):
        if brace == "{":
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return i
    return None


def brace_delta(line: str) -> int:
    """Net change in brace depth contributed by a single line."""
    delta = 0
    for _, brace in _unquoted_braces(line):
        delta += 1 if brace == "{" else -1
    return delta


def split_segments(text: str) -> list[tuple[int, int]]:
    """Split text into top-level segments, each ending after a closed block.

    Used for bodies written on one line, e.g. ``area() { return 1 } size() => 2``
    yields the offsets of ``area() { return 1 }`` and `` size() => 2``.
    Blank segments are omitted.
    """
    segments: list[tuple[int, int]] = []
    start = 0
    depth = 0
    for i, brace in _unquoted_braces(text):
        if brace == "{":
            depth += 1
        elif depth > 0:
            depth -= 1
            if depth == 0:
                segments.append((start, i + 1))
                start = i + 1
    if start < len(text):
        segments.append((start, len(text)))
    return [(s, e) for s, e in segments if text[s:e].strip()]
