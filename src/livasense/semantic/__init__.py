"""Structural code intelligence for Liva source text."""

from ..errors import UnsupportedLanguageError
from .conformance import (
    ClassEntry,
    Violation,
    ViolationKind,
    build_class_table,
    build_interface_table,
    check_conformance,
    validate_interfaces,
)
from .extractor import LivaIndexer, StructuralExtractor, extract
from .registry import (
    add_extensions,
    detect_language,
    get_indexer,
    get_indexer_for_path,
    register_indexer,
    supported_languages,
)
from .resolver import (
    find_definition,
    find_references,
    resolve_definition,
    resolve_references,
    word_at,
)
from .scanner import brace_delta, find_matching_close
from .signature import SignatureHelp, signature_help
from .symbols import ContainerSymbol, Span, Symbol, SymbolKind, SymbolModel

# Register built-in indexers
register_indexer("liva", [".liva"], LivaIndexer)

__all__ = [
    # Symbol model
    "ContainerSymbol",
    "Span",
    "Symbol",
    "SymbolKind",
    "SymbolModel",
    # Extraction
    "LivaIndexer",
    "StructuralExtractor",
    "extract",
    "find_matching_close",
    "brace_delta",
    # Conformance
    "ClassEntry",
    "Violation",
    "ViolationKind",
    "build_class_table",
    "build_interface_table",
    "check_conformance",
    "validate_interfaces",
    # Name resolution
    "find_definition",
    "find_references",
    "resolve_definition",
    "resolve_references",
    "word_at",
    # Signature help
    "SignatureHelp",
    "signature_help",
    # Registry functions
    "register_indexer",
    "add_extensions",
    "detect_language",
    "get_indexer",
    "get_indexer_for_path",
    "supported_languages",
    "UnsupportedLanguageError",
]
