"""
InstallStrategy model — one way of getting the artifact onto the host.

Strategies are pure data: an ordered list of argv templates plus the
preconditions that decide whether they are worth trying here. The
chain executor renders the templates and runs them; nothing in this
model touches the system.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class InstallStrategy(BaseModel):
    """A catalog entry.

    Command templates may reference ``{artifact}``, ``{repository}``,
    ``{script_url}``, ``{brew_tap}``, ``{asset}``, ``{asset_url}``,
    ``{install_dir}``, ``{workdir}``, ``{os}`` and ``{arch}``.
    """

    id: str
    label: str = ""
    priority: int = 0                       # 1-based catalog position
    requires: list[str] = Field(default_factory=list)   # binaries on PATH
    os_families: list[str] = Field(default_factory=lambda: ["linux", "macos"])
    commands: list[list[str]] = Field(default_factory=list)
    artifact_path: str | None = None        # template; None = search
    timeout: int = 300                      # seconds for the whole strategy
    enabled: bool = True

    @property
    def display_name(self) -> str:
        return self.label or self.id
