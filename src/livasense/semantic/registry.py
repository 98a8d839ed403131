"""Registry of structural indexers by language and file extension."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from ..errors import UnsupportedLanguageError

if TYPE_CHECKING:
    from .indexer_protocol import StructuralIndexer


@dataclass(frozen=True)
class LanguageEntry:
    name: str
    extensions: tuple[str, ...]
    factory: Callable[..., StructuralIndexer]


# Global registry state
_languages: dict[str, LanguageEntry] = {}
_extension_to_language: dict[str, str] = {}


def register_indexer(
    language: str,
    extensions: list[str],
    factory: Callable[..., StructuralIndexer],
) -> None:
    """Register an indexer factory for a language.

    Args:
        language: Language identifier (e.g., "liva").
        extensions: File extensions to associate (e.g., [".liva"]).
        factory: Callable returning a StructuralIndexer; receives the
            keyword options passed to ``get_indexer``.
    """
    normalized = tuple(ext.lower() for ext in extensions)
    _languages[language] = LanguageEntry(language, normalized, factory)
    for ext in normalized:
        _extension_to_language[ext] = language


def add_extensions(language: str, extensions: list[str]) -> None:
    """Associate extra file extensions with an already registered language."""
    if language not in _languages:
        raise UnsupportedLanguageError(language=language, supported=supported_languages())
    for ext in extensions:
        _extension_to_language[ext.lower()] = language


def detect_language(path: str) -> str:
    """Detect the language of a file from its extension.

    Raises:
        UnsupportedLanguageError: If the file extension is not recognized.
    """
    ext = Path(path).suffix.lower()
    if ext not in _extension_to_language:
        raise UnsupportedLanguageError(
            language=ext or "<no extension>",
            supported=supported_languages(),
            hint=f"File '{path}' has no registered indexer.",
        )
    return _extension_to_language[ext]


def get_indexer(language: str, **options) -> StructuralIndexer:
    """Create an indexer for a language.

    Indexers are cheap and stateless, so a new one is built per call.

    Raises:
        UnsupportedLanguageError: If the language is not supported.
    """
    entry = _languages.get(language)
    if entry is None:
        raise UnsupportedLanguageError(language=language, supported=supported_languages())
    return entry.factory(**options)


def get_indexer_for_path(path: str, **options) -> tuple[str, StructuralIndexer]:
    """Get (language, indexer) for a file path.

    Raises:
        UnsupportedLanguageError: If the file extension is not recognized.
    """
    language = detect_language(path)
    return language, get_indexer(language, **options)


def supported_languages() -> list[str]:
    return sorted(_languages)
