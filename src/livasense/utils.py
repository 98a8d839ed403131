"""Utility functions for livasense."""

import bisect
import re

from .errors import InvalidPositionError

POSITION_RE = re.compile(r"^(\d+)(?::(\d+))?$")


def split_lines(text: str) -> list[str]:
    """Split text into lines without their terminators (``\\r\\n`` or ``\\n``)."""
    return [line.rstrip("\r") for line in text.split("\n")]


class LineIndex:
    """Maps absolute offsets in a text to (line, character) positions."""

    def __init__(self, text: str):
        self.text = text
        self.line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.line_starts.append(i + 1)

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 0-based (line, character) of an offset."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect.bisect_right(self.line_starts, offset) - 1
        return line, offset - self.line_starts[line]

    def offset(self, line: int, character: int) -> int:
        """Return the absolute offset of a 0-based (line, character)."""
        return self.line_starts[line] + character

    def end_of_document(self) -> tuple[int, int]:
        return self.position(len(self.text))


def parse_position(value: str) -> tuple[int, int]:
    """
    Parse a 1-based ``LINE`` or ``LINE:COL`` string into a 0-based (line, character).

    Raises:
        InvalidPositionError: If the value is malformed or not positive.
    """
    match = POSITION_RE.match(value.strip())
    if not match:
        raise InvalidPositionError(value, "expected LINE or LINE:COL")

    line = int(match.group(1))
    col = int(match.group(2)) if match.group(2) else 1
    if line < 1 or col < 1:
        raise InvalidPositionError(value, "line and column are 1-based")
    return line - 1, col - 1


def check_position(lines: list[str], line: int, character: int) -> None:
    """
    Validate a 0-based position against document lines.

    Raises:
        InvalidPositionError: If the position lies outside the document.
    """
    label = f"{line + 1}:{character + 1}"
    if line < 0 or line >= len(lines):
        raise InvalidPositionError(label, f"document has {len(lines)} line(s)")
    if character < 0 or character > len(lines[line]):
        raise InvalidPositionError(label, f"line {line + 1} has {len(lines[line])} character(s)")
