"""Protocol definition for structural indexers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .symbols import SymbolModel


class StructuralIndexer(Protocol):
    """Protocol for language-specific structural indexers.

    Outline, conformance and signature help consume only this method.
    """

    def extract(self, text: str) -> SymbolModel:
        """Extract the symbol model of one document.

        Args:
            text: The complete document text.

        Returns:
            Top-level symbols in source order. Never raises on malformed
            input; unrecognised or unterminated constructs are omitted.
        """
        ...
