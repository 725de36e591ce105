"""
Configuration loader — reads bundle-validator.yml into a settings model.

The file is optional. Without one the validator runs on defaults; with
one it is read as YAML, validated against a Pydantic schema, and
returned as a typed ``ValidatorConfig``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "bundle-validator.yml"


class ConfigError(Exception):
    """Raised when validator configuration is invalid or unreadable."""


class ValidatorConfig(BaseModel):
    """Settings for the CLI and the image pull step."""

    model_config = ConfigDict(extra="forbid")

    container_tool: Literal["docker", "podman"] = "docker"
    log_level: str | None = None
    log_file: str | None = None


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for bundle-validator.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the config file, or None if not found.
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


def load_config(path: Path | None = None) -> ValidatorConfig:
    """Load and validate validator configuration.

    Args:
        path: Explicit path to the config file. If None, searches upward
            and falls back to defaults when nothing is found.

    Returns:
        Validated ValidatorConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return ValidatorConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading validator config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ValidatorConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ValidatorConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid validator configuration: {e}") from e

    logger.info("Loaded config from %s (container tool: %s)", path, config.container_tool)
    return config
