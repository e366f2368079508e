"""Settings loading and validation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kmodinfo.errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["Config", "ModinfoSettings", "load_settings", "CONFIG_ENV_VAR"]

CONFIG_ENV_VAR = "KMODINFO_CONFIG"


class ModinfoSettings(BaseModel):
    """Filesystem conventions used to locate modules and the dependency index.

    Attributes:
        modules_dir: Base directory holding per-release module trees.
        depmod_file: Name of the dependency index inside a module tree.
        flat_layout: Also look directly under ``modules_dir`` when the
            release-named subfolder does not hold the file.
        label_width: Column that labelled values are padded to.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    modules_dir: str = "/lib/modules"
    depmod_file: str = "modules.dep"
    flat_layout: bool = False
    label_width: int = Field(default=16, ge=1)


class Config:
    """Configuration accessor with dot-path key support."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        section = self._data.get("modinfo", self._data)
        if not isinstance(section, dict):
            raise ConfigError(message="'modinfo' settings must be a mapping")
        try:
            self._settings = ModinfoSettings(**section)
        except ValidationError as e:
            raise ConfigError(message=f"Invalid settings: {e.errors()[0]['msg']}", cause=e) from e

    @property
    def settings(self) -> ModinfoSettings:
        return self._settings

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load a YAML settings file.

        An empty file yields default settings. Settings may sit at the top
        level or under a ``modinfo:`` mapping.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file cannot be read, is not valid YAML or fails validation.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigNotFoundError(config_path=str(config_path))

        try:
            content = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(message=f"Cannot read settings file {config_path}: {e}", cause=e) from e
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in settings file: {config_path}", cause=e) from e

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Settings file must be a YAML mapping: {config_path}")
        logger.debug("Loaded settings from %s", config_path)
        return cls(parsed)


def load_settings(path: str | Path | None = None) -> ModinfoSettings:
    """Resolve settings from ``path``, then $KMODINFO_CONFIG, then defaults."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return ModinfoSettings()
    return Config.from_file(path).settings
