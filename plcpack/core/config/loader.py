"""
Configuration loader — reads plcpack.yml into typed settings.

The config file is optional. Without one, every setting has a default
that targets a standard TwinCAT XAE installation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

from plcpack.adapters.twincat.automation import DEFAULT_PROG_ID
from plcpack.core.services.package_builder import DEFAULT_LIBRARY_TARGET

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "plcpack.yml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing."""


class AutomationSettings(BaseModel):
    """How to reach the automation interface."""

    adapter: Literal["twincat", "mock"] = "twincat"
    prog_id: str = DEFAULT_PROG_ID
    suppress_ui: bool = True


class PackageSettings(BaseModel):
    """Archive layout options."""

    library_target: str = DEFAULT_LIBRARY_TARGET


class Settings(BaseModel):
    """Root settings — loaded from plcpack.yml."""

    automation: AutomationSettings = Field(default_factory=AutomationSettings)
    package: PackageSettings = Field(default_factory=PackageSettings)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for plcpack.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to plcpack.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to plcpack.yml. If None, searches upward
            and falls back to defaults when nothing is found.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded settings from %s (adapter=%s)", path, settings.automation.adapter)
    return settings
