"""
L0 Data — The install strategy catalog.

A fixed, declaration-ordered list. Order IS priority: the chain walks
it top to bottom and never re-sorts it.

    1. script          official install script (curl | bash)
    2. homebrew        brew tap + brew install
    3. release-binary  GitHub release tarball for this os/arch
    4. source          git clone + cargo build --release

Every command is an argv template rendered at execution time (see
``render_command``). Each strategy must be safe to re-run: the binary
and source strategies work in a fresh temporary directory and
``install`` overwrites the target.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.models.strategy import InstallStrategy
from mato_installer.core.services.install.detection.capabilities import (
    Which,
    missing_binaries,
)
from mato_installer.core.services.install.errors import PreconditionUnmet

logger = logging.getLogger(__name__)


_STRATEGY_RECIPES: list[dict[str, Any]] = [
    {
        "id": "script",
        "label": "Official install script",
        "requires": ["curl", "bash"],
        "commands": [
            ["bash", "-c", "set -o pipefail; curl -fsSL {script_url} | bash"],
        ],
        "artifact_path": None,
    },
    {
        "id": "homebrew",
        "label": "Homebrew",
        "requires": ["brew"],
        "commands": [
            ["brew", "tap", "{brew_tap}"],
            ["brew", "install", "{artifact}"],
        ],
        "artifact_path": None,
    },
    {
        "id": "release-binary",
        "label": "GitHub release binary",
        "requires": ["curl", "tar", "install"],
        "commands": [
            ["mkdir", "-p", "{install_dir}"],
            ["curl", "-fsSL", "-o", "{workdir}/{asset}", "{asset_url}"],
            ["tar", "-xzf", "{workdir}/{asset}", "-C", "{workdir}"],
            ["install", "-m", "0755", "{workdir}/{artifact}", "{install_dir}/{artifact}"],
        ],
        "artifact_path": "{install_dir}/{artifact}",
    },
    {
        "id": "source",
        "label": "Build from source",
        "requires": ["git", "cargo", "install"],
        "commands": [
            ["git", "clone", "--depth", "1", "https://github.com/{repository}.git", "{workdir}/src"],
            ["cargo", "build", "--release", "--manifest-path", "{workdir}/src/Cargo.toml"],
            ["mkdir", "-p", "{install_dir}"],
            [
                "install", "-m", "0755",
                "{workdir}/src/target/release/{artifact}", "{install_dir}/{artifact}",
            ],
        ],
        "artifact_path": "{install_dir}/{artifact}",
    },
]

STRATEGY_IDS: tuple[str, ...] = tuple(recipe["id"] for recipe in _STRATEGY_RECIPES)


class StrategyCatalog(Sequence[InstallStrategy]):
    """Ordered, read-only collection of strategies."""

    def __init__(self, strategies: Sequence[InstallStrategy]):
        self._strategies = tuple(strategies)

    def __getitem__(self, index):  # type: ignore[override]
        return self._strategies[index]

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self) -> Iterator[InstallStrategy]:
        return iter(self._strategies)

    def get(self, strategy_id: str) -> InstallStrategy | None:
        for s in self._strategies:
            if s.id == strategy_id:
                return s
        return None

    @property
    def ids(self) -> list[str]:
        return [s.id for s in self._strategies]


def build_catalog(config: InstallerConfig | None = None) -> StrategyCatalog:
    """Materialize the default catalog with configured timeouts/switches."""
    config = config or InstallerConfig()
    disabled = set(config.disabled)
    strategies = [
        InstallStrategy(
            priority=position,
            timeout=config.timeout_for(recipe["id"]),
            enabled=recipe["id"] not in disabled,
            **recipe,
        )
        for position, recipe in enumerate(_STRATEGY_RECIPES, start=1)
    ]
    return StrategyCatalog(strategies)


# ── Preconditions ───────────────────────────────────────────────


def check_preconditions(
    entry: InstallStrategy,
    platform: PlatformInfo,
    which: Which = shutil.which,
) -> None:
    """Raise ``PreconditionUnmet`` naming the first unmet requirement."""
    if not entry.enabled:
        raise PreconditionUnmet("disabled in configuration")
    if platform.os not in entry.os_families:
        raise PreconditionUnmet(f"not available on {platform.os}")
    missing = missing_binaries(entry.requires, which=which)
    if missing:
        raise PreconditionUnmet(f"requires {', '.join(missing)} on PATH")


def eligible(
    entry: InstallStrategy,
    platform: PlatformInfo,
    which: Which = shutil.which,
) -> bool:
    """Whether ``entry`` is worth attempting on ``platform``."""
    try:
        check_preconditions(entry, platform, which=which)
    except PreconditionUnmet:
        return False
    return True


# ── Template rendering ──────────────────────────────────────────


def template_context(
    config: InstallerConfig,
    platform: PlatformInfo | None = None,
    **extra: str,
) -> dict[str, str]:
    """Placeholder values for command templates.

    ``platform`` may be omitted for display purposes, in which case the
    os/arch slots render as ``<os>``/``<arch>``.
    """
    if platform is not None:
        os_name, arch = platform.os, platform.arch
        asset = platform.asset_name(config.artifact)
    else:
        os_name, arch = "<os>", "<arch>"
        asset = f"{config.artifact}-<os>-<arch>.tar.gz"
    ctx = {
        "artifact": config.artifact,
        "repository": config.repository,
        "script_url": config.script_url,
        "brew_tap": config.brew_tap,
        "os": os_name,
        "arch": arch,
        "asset": asset,
        "asset_url": (
            f"https://github.com/{config.repository}/releases/latest/download/{asset}"
        ),
    }
    ctx.update(extra)
    return ctx


def render_command(template: Sequence[str], context: Mapping[str, str]) -> list[str]:
    """Fill ``{placeholders}`` in every argv element.

    Raises:
        KeyError: If a template names an unknown placeholder.
    """
    return [part.format_map(context) for part in template]
