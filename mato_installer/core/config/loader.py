"""
Configuration loader — reads mato-install.yml into InstallerConfig.

The file is optional. Without one, every setting takes its default and
the installer targets the upstream release channels.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.services.install.data.catalog import STRATEGY_IDS

logger = logging.getLogger(__name__)

CONFIG_FILE = "mato-install.yml"

_SECTION = "installer"


class ConfigError(Exception):
    """Raised when installer configuration is invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for mato-install.yml starting from the given directory, walking up.

    Returns:
        Path to the file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load and validate installer configuration.

    Args:
        path: Explicit config path. If None, searches upward and falls
            back to defaults when nothing is found.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return InstallerConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return InstallerConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # settings may sit under "installer:" or at top level
    if _SECTION in data:
        data = data[_SECTION] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'{_SECTION}' in {path} must be a mapping")

    try:
        config = InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration in {path}: {e}") from e

    _check_strategy_ids(config, path)
    logger.info("Loaded installer config from %s", path)
    return config


def _check_strategy_ids(config: InstallerConfig, path: Path) -> None:
    known = set(STRATEGY_IDS)
    unknown = sorted(
        ({*config.disabled} | {*config.timeouts}) - known
    )
    if unknown:
        raise ConfigError(
            f"Unknown strategy id(s) in {path}: {', '.join(unknown)} "
            f"(known: {', '.join(STRATEGY_IDS)})"
        )
