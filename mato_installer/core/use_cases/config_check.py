"""
Config check use case — validate mato-install.yml and report issues.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from mato_installer.core.config.loader import ConfigError, find_config_file, load_config
from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.services.install.data.catalog import STRATEGY_IDS


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: InstallerConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config": self.config.model_dump() if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate installer configuration and report issues.

    A missing file is valid (defaults apply) but produces a warning.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    if config_path is None:
        result.warnings.append("No mato-install.yml found; using defaults.")

    enabled = [sid for sid in STRATEGY_IDS if sid not in config.disabled]
    if not enabled:
        result.warnings.append("Every strategy is disabled; install will always fail.")

    if config.install_dir:
        target = Path(os.path.expandvars(config.install_dir)).expanduser()
        if target.exists() and not os.access(target, os.W_OK):
            result.warnings.append(f"install_dir is not writable: {target}")

    result.valid = not result.errors
    return result
