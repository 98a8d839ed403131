"""Parameter hints for calls to functions declared in the document."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..utils import split_lines
from .extractor import extract
from .symbols import Symbol, SymbolKind, SymbolModel

# Innermost call still open at the end of the prefix: ``name(arg, arg``
OPEN_CALL_RE = re.compile(r"(\w+)\s*\(([^()]*)$")


@dataclass(frozen=True)
class SignatureHelp:
    label: str
    parameters: list[str]
    active_parameter: int
    kind: SymbolKind

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "parameters": list(self.parameters),
            "active_parameter": self.active_parameter,
            "kind": self.kind.value,
        }


def lookup_callable(model: SymbolModel, name: str) -> Symbol | None:
    """Find a callable by name: top-level functions first, then methods."""
    for function in model.functions:
        if function.name == name:
            return function
    for symbol, parent in model.walk():
        if parent is not None and symbol.kind == SymbolKind.METHOD and symbol.name == name:
            return symbol
    return None


def signature_help(
    text: str, line: int, character: int, model: SymbolModel | None = None
) -> SignatureHelp | None:
    """Describe the call surrounding a cursor position, if it names a known callable."""
    lines = split_lines(text)
    if not 0 <= line < len(lines):
        return None
    prefix = lines[line][:character]

    match = OPEN_CALL_RE.search(prefix)
    if not match:
        return None

    if model is None:
        model = extract(text)
    target = lookup_callable(model, match.group(1))
    if target is None:
        return None

    params = target.parameters
    active = match.group(2).count(",")
    return SignatureHelp(
        label=target.label,
        parameters=params,
        active_parameter=min(active, len(params) - 1) if params else 0,
        kind=target.kind,
    )
