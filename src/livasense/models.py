"""Data models for livasense settings."""

from dataclasses import dataclass, field, fields, replace
from typing import Any

from .errors import InvalidSettingsError

SCHEMA_VERSION = 1

SETTING_TYPES: dict[str, type] = {
    "debounce_ms": int,
    "validate_interfaces": bool,
    "include_variables": bool,
    "language_id": str,
    "file_extensions": list,
    "compiler_path": str,
    "output_directory": str,
    "auto_build": bool,
}

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _check_type(key: str, value: Any) -> None:
    expected = SETTING_TYPES[key]
    # bool is an int subclass; keep the two apart
    if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise InvalidSettingsError(key, f"expected an integer, got {value!r}")
    if expected is bool and not isinstance(value, bool):
        raise InvalidSettingsError(key, f"expected true or false, got {value!r}")
    if expected is str and not isinstance(value, str):
        raise InvalidSettingsError(key, f"expected a string, got {value!r}")
    if expected is list and (
        not isinstance(value, list) or not all(isinstance(v, str) for v in value)
    ):
        raise InvalidSettingsError(key, f"expected a list of strings, got {value!r}")


@dataclass
class Settings:
    """User-tunable behaviour of the analysis host.

    The compiler fields are kept for the external compiler integration;
    the structural core never reads them.
    """

    debounce_ms: int = 300
    validate_interfaces: bool = True
    include_variables: bool = False
    language_id: str = "liva"
    file_extensions: list[str] = field(default_factory=lambda: [".liva"])
    compiler_path: str = "livac"
    output_directory: str = "./target/liva_build"
    auto_build: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            _check_type(f.name, getattr(self, f.name))
        if self.debounce_ms < 0:
            raise InvalidSettingsError("debounce_ms", "must be >= 0")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def with_value(self, key: str, raw: str) -> "Settings":
        """Return a copy with one setting parsed from its command-line text.

        Raises:
            InvalidSettingsError: If the key is unknown or the text does not parse.
        """
        if key not in SETTING_TYPES:
            raise InvalidSettingsError(key, "unknown setting")

        expected = SETTING_TYPES[key]
        value: Any = raw
        if expected is int:
            try:
                value = int(raw)
            except ValueError:
                raise InvalidSettingsError(key, f"expected an integer, got {raw!r}") from None
        elif expected is bool:
            lowered = raw.strip().lower()
            if lowered not in _TRUE | _FALSE:
                raise InvalidSettingsError(key, f"expected true or false, got {raw!r}")
            value = lowered in _TRUE
        elif expected is list:
            value = [part.strip() for part in raw.split(",") if part.strip()]
        return replace(self, **{key: value})

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "debounce_ms": self.debounce_ms,
            "validate_interfaces": self.validate_interfaces,
            "include_variables": self.include_variables,
            "language_id": self.language_id,
            "file_extensions": list(self.file_extensions),
            "compiler_path": self.compiler_path,
            "output_directory": self.output_directory,
            "auto_build": self.auto_build,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        values = {}
        for key, value in data.items():
            if key == "schema_version":
                continue
            if key not in SETTING_TYPES:
                raise InvalidSettingsError(key, "unknown setting")
            values[key] = value
        return cls(**values)
