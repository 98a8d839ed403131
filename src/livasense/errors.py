"""Custom exceptions for livasense."""


class LivasenseError(Exception):
    """Base exception for all livasense errors."""

    pass


class ConfigExistsError(LivasenseError):
    """Raised when trying to init settings but they already exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Settings already exist at {path}. Use --force to overwrite.")


class InvalidSchemaVersionError(LivasenseError):
    """Raised when settings have an unsupported schema version."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported schema version {found}. This tool supports version {supported}."
        )


class InvalidSettingsError(LivasenseError):
    """Raised when a settings key is unknown or has the wrong type."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid setting '{key}': {reason}")


class UnsupportedLanguageError(LivasenseError):
    """Raised when no indexer is registered for a language or file."""

    def __init__(self, language: str, supported: list[str], hint: str | None = None):
        self.language = language
        self.supported = supported
        msg = f"Unsupported language: {language}. Supported: {', '.join(supported) or 'none'}"
        if hint:
            msg = f"{msg} ({hint})"
        super().__init__(msg)


class DocumentNotFoundError(LivasenseError):
    """Raised when a query names a document that is not open."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Document not open: {uri}")


class InvalidPositionError(LivasenseError):
    """Raised when a position is malformed or outside the document."""

    def __init__(self, position: str, reason: str | None = None):
        self.position = position
        msg = f"Invalid position: {position}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
