"""Interface conformance checking for classes in one document."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..utils import split_lines
from .extractor import extract
from .symbols import ContainerSymbol, Span, SymbolModel

# Declared interfaces may live in files this scan cannot see
UNKNOWN_INTERFACE_SEVERITY = "warning"
MISSING_METHOD_SEVERITY = "error"


class ViolationKind(str, Enum):
    UNKNOWN_INTERFACE = "unknown_interface"
    MISSING_METHOD = "missing_method"


@dataclass(frozen=True)
class Violation:
    """A mismatch between a class's declared interfaces and its methods.

    Attributes:
        kind: Which check failed.
        class_name: The offending class.
        interface_name: The interface named in the implements clause.
        span: The whole implements-declaration line of the class.
        method_name: Missing method name (MISSING_METHOD only).
        required: Reconstructed required signature, e.g. ``area(): float``.
    """

    kind: ViolationKind
    class_name: str
    interface_name: str
    span: Span
    method_name: str | None = None
    required: str | None = None

    @property
    def severity(self) -> str:
        if self.kind == ViolationKind.UNKNOWN_INTERFACE:
            return UNKNOWN_INTERFACE_SEVERITY
        return MISSING_METHOD_SEVERITY

    @property
    def message(self) -> str:
        if self.kind == ViolationKind.UNKNOWN_INTERFACE:
            return f"Interface '{self.interface_name}' not found"
        return (
            f"Class '{self.class_name}' does not implement method '{self.method_name}' "
            f"from interface '{self.interface_name}'\n\n"
            f"Required: {self.required}\n\n"
            "Add this method to the class or remove the interface from the implements clause"
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "severity": self.severity,
            "class_name": self.class_name,
            "interface_name": self.interface_name,
            "method_name": self.method_name,
            "required": self.required,
            "message": self.message,
            "span": self.span.to_dict(),
        }


@dataclass(frozen=True)
class ClassEntry:
    """A class reduced to what conformance needs."""

    name: str
    implements: tuple[str, ...]
    method_names: frozenset[str]
    implements_span: Span


def build_interface_table(model: SymbolModel) -> dict[str, ContainerSymbol]:
    """Map interface names to their symbols. A later duplicate replaces an earlier one."""
    table: dict[str, ContainerSymbol] = {}
    for iface in model.interfaces:
        table[iface.name] = iface
    return table


def build_class_table(model: SymbolModel, text: str) -> list[ClassEntry]:
    """Reduce every class to its implements list and own method names, in document order."""
    lines = split_lines(text)
    entries: list[ClassEntry] = []
    for cls in model.classes:
        head_line = cls.span.start_line
        line_length = len(lines[head_line]) if head_line < len(lines) else 0
        entries.append(
            ClassEntry(
                name=cls.name,
                implements=tuple(cls.implements),
                method_names=cls.method_names,
                implements_span=Span.on_line(head_line, 0, line_length),
            )
        )
    return entries


def check_conformance(
    interfaces: dict[str, ContainerSymbol],
    classes: list[ClassEntry],
) -> list[Violation]:
    """Report unknown interfaces and unimplemented interface methods.

    Methods are matched by name only; parameters and return types are not
    compared. Order: classes, then their implements list, then the
    interface's methods, each in declaration order.
    """
    violations: list[Violation] = []
    for entry in classes:
        for iface_name in entry.implements:
            iface = interfaces.get(iface_name)
            if iface is None:
                violations.append(
                    Violation(
                        kind=ViolationKind.UNKNOWN_INTERFACE,
                        class_name=entry.name,
                        interface_name=iface_name,
                        span=entry.implements_span,
                    )
                )
                continue

            for method in iface.methods:
                if method.name not in entry.method_names:
                    violations.append(
                        Violation(
                            kind=ViolationKind.MISSING_METHOD,
                            class_name=entry.name,
                            interface_name=iface_name,
                            span=entry.implements_span,
                            method_name=method.name,
                            required=method.label,
                        )
                    )
    return violations


def validate_interfaces(text: str, model: SymbolModel | None = None) -> list[Violation]:
    """Run a full conformance pass over one document.

    Args:
        text: Document text.
        model: Symbol model of ``text`` if already extracted.
    """
    if model is None:
        model = extract(text)
    return check_conformance(build_interface_table(model), build_class_table(model, text))
