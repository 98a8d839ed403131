"""Editor diagnostics and the per-document diagnostic table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from .semantic import Span, Violation

INTERFACE_SOURCE = "liva-interfaces"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class Diagnostic:
    """A (span, severity, message) triple shown by the editor."""

    span: Span
    severity: Severity
    message: str
    source: str = INTERFACE_SOURCE

    def to_dict(self) -> dict[str, Any]:
        return {
            "span": self.span.to_dict(),
            "severity": self.severity.value,
            "message": self.message,
            "source": self.source,
        }


def violation_to_diagnostic(violation: Violation) -> Diagnostic:
    return Diagnostic(
        span=violation.span,
        severity=Severity(violation.severity),
        message=violation.message,
    )


class DiagnosticTable:
    """Diagnostics per document URI, replaced wholesale on each analysis."""

    def __init__(self) -> None:
        self._entries: dict[str, list[Diagnostic]] = {}

    def set(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        self._entries[uri] = list(diagnostics)

    def get(self, uri: str) -> list[Diagnostic]:
        """Diagnostics for a document; empty when none were recorded."""
        return list(self._entries.get(uri, []))

    def delete(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> Iterator[tuple[str, list[Diagnostic]]]:
        for uri, diagnostics in self._entries.items():
            yield uri, list(diagnostics)

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)
