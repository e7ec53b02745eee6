"""
PlatformInfo — the classified host (OS family + CPU architecture).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class PlatformInfo(BaseModel):
    """A supported host platform.

    ``system`` and ``machine`` keep the raw ``platform`` module values
    for diagnostics; ``os`` and ``arch`` are the normalized buckets that
    release assets are named after.
    """

    os: Literal["linux", "macos"]
    arch: Literal["x86_64", "aarch64"]
    system: str = ""
    machine: str = ""

    def asset_name(self, artifact: str) -> str:
        """Release tarball name, e.g. ``mato-linux-x86_64.tar.gz``."""
        return f"{artifact}-{self.os}-{self.arch}.tar.gz"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"
