"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.platform import PlatformInfo


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Install directory for tests; starts empty."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def config(bin_dir: Path) -> InstallerConfig:
    """Offline config installing into ``bin_dir``."""
    return InstallerConfig(version_check=False, install_dir=str(bin_dir))


@pytest.fixture
def linux() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x86_64", system="Linux", machine="x86_64")


@pytest.fixture
def everything_on_path():
    """A ``which`` that finds every binary."""
    return lambda name: f"/usr/bin/{name}"


@pytest.fixture
def nothing_on_path():
    """A ``which`` that finds nothing."""
    return lambda name: None


