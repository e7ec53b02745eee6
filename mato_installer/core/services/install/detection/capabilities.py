"""
L3 Detection — Host capabilities and artifact lookup.

Read-only probes: which binaries are on PATH, where the installer
may write without sudo, and where an installed artifact can be found.
Strategies like the install script or Homebrew choose their own
destination, so artifact lookup searches PATH plus the usual install
directories instead of trusting PATH alone.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

Which = Callable[[str], "str | None"]

SYSTEM_BIN_DIR = Path("/usr/local/bin")


def user_bin_dir() -> Path:
    """``~/.local/bin`` for installs without sudo."""
    return Path.home() / ".local" / "bin"


def missing_binaries(binaries: Iterable[str], which: Which = shutil.which) -> list[str]:
    """Return the subset of ``binaries`` not found on PATH, in order."""
    return [b for b in binaries if not which(b)]


def choose_install_dir(configured: str | None = None) -> Path:
    """Pick the directory the binary/source strategies install into.

    Resolution order:
      1. Explicit configuration
      2. ``/usr/local/bin`` when writable by the current user
      3. ``~/.local/bin``
    """
    if configured:
        return Path(os.path.expandvars(configured)).expanduser()
    if SYSTEM_BIN_DIR.is_dir() and os.access(SYSTEM_BIN_DIR, os.W_OK):
        return SYSTEM_BIN_DIR
    return user_bin_dir()


def search_dirs(install_dir: Path | None = None) -> list[Path]:
    """Directories checked for an installed artifact, most specific first."""
    dirs: list[Path] = []
    if install_dir is not None:
        dirs.append(install_dir)
    dirs.extend([
        SYSTEM_BIN_DIR,
        user_bin_dir(),
        Path.home() / ".cargo" / "bin",
        Path("/opt/homebrew/bin"),
        Path("/home/linuxbrew/.linuxbrew/bin"),
    ])
    seen: set[Path] = set()
    unique: list[Path] = []
    for d in dirs:
        if d not in seen:
            seen.add(d)
            unique.append(d)
    return unique


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def locate_artifact(
    name: str,
    expected: Path | None = None,
    dirs: Iterable[Path] = (),
    which: Which = shutil.which,
) -> Path | None:
    """Find an executable artifact.

    When ``expected`` is given only that path counts; otherwise PATH is
    searched first, then ``dirs``.

    Returns:
        Path to the executable, or ``None`` if nothing was found.
    """
    if expected is not None:
        if _is_executable(expected):
            return expected
        logger.debug("Expected artifact missing or not executable: %s", expected)
        return None

    on_path = which(name)
    if on_path:
        return Path(on_path)

    for d in dirs:
        candidate = d / name
        if _is_executable(candidate):
            return candidate

    return None
