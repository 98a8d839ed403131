"""Symbol model produced by the structural extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class SymbolKind(str, Enum):
    """Kind of a recognised declaration."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    CONSTANT = "constant"
    FIELD = "field"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    VARIABLE = "variable"


CALLABLE_KINDS = frozenset({SymbolKind.FUNCTION, SymbolKind.METHOD, SymbolKind.CONSTRUCTOR})


@dataclass(frozen=True)
class Span:
    """A range of text. Lines and characters are 0-based; the end is exclusive."""

    start_line: int
    start_character: int
    end_line: int
    end_character: int

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> "Span":
        return cls(line, start, line, end)

    def contains(self, other: "Span") -> bool:
        """Check whether ``other`` lies entirely within this span."""
        starts_after = (other.start_line, other.start_character) >= (
            self.start_line,
            self.start_character,
        )
        ends_before = (other.end_line, other.end_character) <= (
            self.end_line,
            self.end_character,
        )
        return starts_after and ends_before

    def to_dict(self) -> dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_character": self.start_character,
            "end_line": self.end_line,
            "end_character": self.end_character,
        }


@dataclass
class Symbol:
    """A recognised declaration.

    Attributes:
        kind: What was declared.
        name: Identifier text.
        span: Full range of the declaring construct (block bodies included).
        selection_span: Range of just the name; always inside ``span``.
        signature: Raw parameter text for callables, empty otherwise.
        declared_type: Return type or field type annotation, if written.
        detail: Short outline detail (constant value preview, field type).
    """

    kind: SymbolKind
    name: str
    span: Span
    selection_span: Span
    signature: str = ""
    declared_type: str | None = None
    detail: str = ""

    @property
    def is_callable(self) -> bool:
        return self.kind in CALLABLE_KINDS

    @property
    def label(self) -> str:
        """Display text: ``name(params): Type`` for callables, else the name."""
        if not self.is_callable:
            return self.name
        text = f"{self.name}({self.signature})"
        if self.declared_type:
            text = f"{text}: {self.declared_type}"
        return text

    @property
    def parameters(self) -> list[str]:
        return [p.strip() for p in self.signature.split(",") if p.strip()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "label": self.label,
            "signature": self.signature,
            "declared_type": self.declared_type,
            "detail": self.detail,
            "span": self.span.to_dict(),
            "selection_span": self.selection_span.to_dict(),
        }


@dataclass
class ContainerSymbol(Symbol):
    """A class or interface together with its members.

    ``implements`` lists interface names from the class head, in order.
    Interfaces only hold signature-only methods; classes hold fields,
    methods and the constructor.
    """

    implements: list[str] = field(default_factory=list)
    members: list[Symbol] = field(default_factory=list)

    @property
    def methods(self) -> list[Symbol]:
        return [m for m in self.members if m.kind == SymbolKind.METHOD]

    @property
    def fields(self) -> list[Symbol]:
        return [m for m in self.members if m.kind == SymbolKind.FIELD]

    @property
    def constructor(self) -> Symbol | None:
        for member in self.members:
            if member.kind == SymbolKind.CONSTRUCTOR:
                return member
        return None

    @property
    def method_names(self) -> frozenset[str]:
        """Names of the container's own methods, constructor excluded."""
        return frozenset(m.name for m in self.methods)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["implements"] = list(self.implements)
        result["members"] = [m.to_dict() for m in self.members]
        return result


@dataclass
class SymbolModel:
    """Ordered top-level symbols of one document, in source order."""

    symbols: list[Symbol] = field(default_factory=list)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def of_kind(self, kind: SymbolKind) -> list[Symbol]:
        return [s for s in self.symbols if s.kind == kind]

    @property
    def classes(self) -> list[ContainerSymbol]:
        return [s for s in self.symbols if isinstance(s, ContainerSymbol) and s.kind == SymbolKind.CLASS]

    @property
    def interfaces(self) -> list[ContainerSymbol]:
        return [
            s for s in self.symbols if isinstance(s, ContainerSymbol) and s.kind == SymbolKind.INTERFACE
        ]

    @property
    def functions(self) -> list[Symbol]:
        return self.of_kind(SymbolKind.FUNCTION)

    def walk(self) -> Iterator[tuple[Symbol, ContainerSymbol | None]]:
        """Yield (symbol, parent) for every symbol, members after their container."""
        for symbol in self.symbols:
            yield symbol, None
            if isinstance(symbol, ContainerSymbol):
                for member in symbol.members:
                    yield member, symbol

    def find(self, name: str) -> list[Symbol]:
        """All symbols (top-level or member) with the given name."""
        return [s for s, _ in self.walk() if s.name == name]

    def to_dict(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.symbols]
