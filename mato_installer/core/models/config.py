"""
InstallerConfig — settings loaded from mato-install.yml.

Every field has a default, so a missing config file means "install
mato from the upstream locations".
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class InstallerConfig(BaseModel):
    """Where the artifact comes from and how long each step may take."""

    artifact: str = "mato"
    repository: str = "mr-kelly/mato"
    script_url: str = "http://mato.sh/install.sh"
    brew_tap: str = "mr-kelly/tap"

    # ── Published version lookup ─────────────────────────────────
    version_url: str = "https://mato.sh/version.txt"
    version_timeout: float = Field(default=3.0, gt=0)
    version_check: bool = True

    # ── Execution ────────────────────────────────────────────────
    install_dir: str | None = None          # None = auto-detect
    verify_timeout: float = Field(default=15.0, gt=0)
    default_timeout: int = Field(default=300, gt=0)
    timeouts: dict[str, int] = Field(default_factory=lambda: {"source": 1800})
    disabled: list[str] = Field(default_factory=list)

    @field_validator("artifact", "repository")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("repository")
    @classmethod
    def _owner_repo(cls, value: str) -> str:
        if value.count("/") != 1:
            raise ValueError(f"expected 'owner/repo', got '{value}'")
        return value

    @field_validator("timeouts")
    @classmethod
    def _positive_timeouts(cls, value: dict[str, int]) -> dict[str, int]:
        for strategy_id, seconds in value.items():
            if seconds <= 0:
                raise ValueError(f"timeout for '{strategy_id}' must be positive")
        return value

    def timeout_for(self, strategy_id: str) -> int:
        """Per-strategy timeout in seconds."""
        return self.timeouts.get(strategy_id, self.default_timeout)
