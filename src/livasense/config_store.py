"""Settings storage for livasense."""

import json
import os
import tempfile
from pathlib import Path

from .errors import ConfigExistsError, InvalidSchemaVersionError, InvalidSettingsError
from .models import SCHEMA_VERSION, Settings

# Can be overridden via LIVASENSE_DATA_DIR environment variable
DATA_DIR_ENV = "LIVASENSE_DATA_DIR"
SETTINGS_FILE = "settings.json"


def default_data_dir() -> Path:
    return Path(os.environ.get(DATA_DIR_ENV, Path.home() / ".livasense"))


class SettingsStore:
    """Manages reading and writing the settings file."""

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize SettingsStore.

        Args:
            config_dir: Override settings directory (for testing).
        """
        self.config_dir = config_dir or default_data_dir()
        self.config_path = self.config_dir / SETTINGS_FILE

    def exists(self) -> bool:
        """Check if the settings file exists."""
        return self.config_path.exists()

    def load(self) -> Settings:
        """
        Load settings from disk, or defaults when no file exists.

        Raises:
            InvalidSchemaVersionError: If schema version is unsupported.
            InvalidSettingsError: If the file is not valid settings JSON.
        """
        if not self.exists():
            return Settings()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidSettingsError(str(self.config_path), f"not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidSettingsError(str(self.config_path), "expected a JSON object")

        version = data.get("schema_version", 0)
        if version != SCHEMA_VERSION:
            raise InvalidSchemaVersionError(version, SCHEMA_VERSION)

        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        """
        Save settings to disk atomically.

        Uses write-to-temp-then-rename for atomicity.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        data = settings.to_dict()
        fd, temp_path = tempfile.mkstemp(
            dir=self.config_dir, prefix=".settings_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")  # trailing newline
            os.replace(temp_path, self.config_path)
        except Exception:
            # Clean up temp file on failure (ignore errors if already removed)
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def init(self, force: bool = False) -> Settings:
        """
        Write default settings.

        Args:
            force: If True, overwrite existing settings.

        Raises:
            ConfigExistsError: If settings exist and force=False.
        """
        if self.exists() and not force:
            raise ConfigExistsError(str(self.config_path))

        settings = Settings()
        self.save(settings)
        return settings

    def set_value(self, key: str, raw: str) -> Settings:
        """Update one setting from its text form and persist the result."""
        settings = self.load().with_value(key, raw)
        self.save(settings)
        return settings
