"""
L3 Detection — Host platform classification.

Read-only: maps ``platform.system()`` / ``platform.machine()`` onto
the OS/arch buckets that release assets are published for.
"""

from __future__ import annotations

import logging
import platform

from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.services.install.errors import EnvironmentUnknown

logger = logging.getLogger(__name__)

_OS_MAP: dict[str, str] = {
    "linux": "linux",
    "darwin": "macos",
}

_ARCH_MAP: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def detect_platform() -> PlatformInfo:
    """Classify the running host.

    Returns:
        PlatformInfo with normalized ``os`` and ``arch``.

    Raises:
        EnvironmentUnknown: If either value is outside the supported set.
    """
    system = platform.system()
    machine = platform.machine()

    os_family = _OS_MAP.get(system.lower())
    if os_family is None:
        raise EnvironmentUnknown(
            f"Unsupported operating system '{system or 'unknown'}' "
            f"(supported: {', '.join(sorted(set(_OS_MAP.values())))})"
        )

    arch = _ARCH_MAP.get(machine.lower())
    if arch is None:
        raise EnvironmentUnknown(
            f"Unsupported CPU architecture '{machine or 'unknown'}' "
            f"(supported: {', '.join(sorted(set(_ARCH_MAP.values())))})"
        )

    info = PlatformInfo(os=os_family, arch=arch, system=system, machine=machine)
    logger.debug("Detected platform %s (system=%s, machine=%s)", info, system, machine)
    return info
