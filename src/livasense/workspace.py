"""Open documents, debounced re-analysis and per-document diagnostics.

Every analysis pass re-reads the whole document; nothing is cached between
passes. A pass runs against a snapshot of the text and its result is dropped
if the document changed (or closed) while it ran.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from .diagnostics import Diagnostic, DiagnosticTable, violation_to_diagnostic
from .errors import DocumentNotFoundError
from .models import Settings
from .semantic import (
    SignatureHelp,
    Span,
    SymbolModel,
    Violation,
    get_indexer,
    resolve_definition,
    resolve_references,
    signature_help,
    validate_interfaces,
    word_at,
)
from .utils import check_position, split_lines

log = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


@dataclass
class Document:
    uri: str
    text: str
    version: int = 0

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)


@dataclass(frozen=True)
class Analysis:
    """Result of one analysis pass over one document version."""

    uri: str
    version: int
    model: SymbolModel
    violations: list[Violation]
    diagnostics: list[Diagnostic]


def analyze_text(text: str, settings: Settings) -> tuple[SymbolModel, list[Violation]]:
    """Extract the symbol model and, if enabled, conformance violations."""
    indexer = get_indexer(settings.language_id, include_variables=settings.include_variables)
    model = indexer.extract(text)
    violations = validate_interfaces(text, model) if settings.validate_interfaces else []
    return model, violations


class Debouncer:
    """Runs a callback after a delay, restarting the delay on every schedule.

    At most one callback is pending per key; scheduling again cancels it.
    """

    def __init__(self, timer_factory: TimerFactory = threading.Timer):
        self._timer_factory = timer_factory
        self._pending: dict[str, Any] = {}
        self._lock = threading.Lock()

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        with self._lock:
            self._cancel_locked(key)
            timer: Any = None

            def fire() -> None:
                with self._lock:
                    # Cancelled or superseded after the timer already fired
                    if self._pending.get(key) is not timer:
                        return
                    del self._pending[key]
                callback()

            timer = self._timer_factory(delay, fire)
            if isinstance(timer, threading.Timer):
                timer.daemon = True
            self._pending[key] = timer
            timer.start()

    def cancel(self, key: str) -> None:
        with self._lock:
            self._cancel_locked(key)

    def cancel_all(self) -> None:
        with self._lock:
            for timer in self._pending.values():
                timer.cancel()
            self._pending.clear()

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._pending

    def _cancel_locked(self, key: str) -> None:
        timer = self._pending.pop(key, None)
        if timer is not None:
            timer.cancel()


class Workspace:
    """Documents open in the editor and the diagnostics computed for them."""

    def __init__(self, settings: Settings | None = None, debouncer: Debouncer | None = None):
        self.settings = settings or Settings()
        self.diagnostics = DiagnosticTable()
        self.debouncer = debouncer or Debouncer()
        self._documents: dict[str, Document] = {}
        self._lock = threading.RLock()

    # --- Document lifecycle ---

    def open(self, uri: str, text: str, version: int = 0) -> Document:
        with self._lock:
            doc = Document(uri=uri, text=text, version=version)
            self._documents[uri] = doc
            return doc

    def change(self, uri: str, text: str, version: int | None = None) -> Document:
        """
        Replace a document's text.

        Raises:
            DocumentNotFoundError: If the document is not open.
        """
        with self._lock:
            doc = self.get(uri)
            doc.text = text
            doc.version = doc.version + 1 if version is None else version
            return doc

    def update(self, uri: str, text: str, version: int | None = None) -> Document:
        """Open the document, or change it if already open."""
        with self._lock:
            if uri in self._documents:
                return self.change(uri, text, version)
            return self.open(uri, text, version or 0)

    def close(self, uri: str) -> None:
        """
        Close a document and forget its diagnostics.

        Raises:
            DocumentNotFoundError: If the document is not open.
        """
        with self._lock:
            if uri not in self._documents:
                raise DocumentNotFoundError(uri)
            self.debouncer.cancel(uri)
            self.diagnostics.delete(uri)
            del self._documents[uri]

    def get(self, uri: str) -> Document:
        with self._lock:
            doc = self._documents.get(uri)
            if doc is None:
                raise DocumentNotFoundError(uri)
            return doc

    def list_documents(self) -> list[Document]:
        with self._lock:
            return list(self._documents.values())

    def shutdown(self) -> None:
        self.debouncer.cancel_all()
        with self._lock:
            self._documents.clear()
            self.diagnostics.clear()

    # --- Analysis ---

    def analyze(self, uri: str) -> Analysis | None:
        """
        Analyze the current text of a document and record its diagnostics.

        Returns None when the document changed or closed during the pass;
        the stale result is discarded.

        Raises:
            DocumentNotFoundError: If the document is not open.
        """
        with self._lock:
            doc = self.get(uri)
            text, version = doc.text, doc.version

        model, violations = analyze_text(text, self.settings)
        diagnostics = [violation_to_diagnostic(v) for v in violations]

        with self._lock:
            current = self._documents.get(uri)
            if current is None or current.version != version:
                log.debug("Discarding stale analysis of %s (version %d)", uri, version)
                return None
            self.diagnostics.set(uri, diagnostics)

        return Analysis(
            uri=uri,
            version=version,
            model=model,
            violations=violations,
            diagnostics=diagnostics,
        )

    def schedule_analysis(self, uri: str) -> None:
        """Analyze after the configured debounce delay, superseding any pending run."""
        self.debouncer.schedule(uri, self.settings.debounce_seconds, lambda: self._analyze_quietly(uri))

    def _analyze_quietly(self, uri: str) -> None:
        try:
            self.analyze(uri)
        except DocumentNotFoundError:
            log.debug("Document %s closed before scheduled analysis", uri)

    # --- Position queries ---

    def outline(self, uri: str) -> SymbolModel:
        model, _ = analyze_text(self.get(uri).text, self.settings)
        return model

    def definition(self, uri: str, line: int, character: int) -> list[Span]:
        """All definition spans of the word at a position (first is the go-to target)."""
        doc = self.get(uri)
        check_position(doc.lines, line, character)
        word = word_at(doc.text, line, character)
        if word is None:
            return []
        return resolve_definition(doc.text, word[0])

    def references(
        self, uri: str, line: int, character: int, include_declaration: bool = True
    ) -> list[Span]:
        doc = self.get(uri)
        check_position(doc.lines, line, character)
        word = word_at(doc.text, line, character)
        if word is None:
            return []
        return resolve_references(doc.text, word[0], include_declaration=include_declaration)

    def signature_help(self, uri: str, line: int, character: int) -> SignatureHelp | None:
        doc = self.get(uri)
        check_position(doc.lines, line, character)
        return signature_help(doc.text, line, character, model=self.outline(uri))
