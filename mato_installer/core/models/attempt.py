"""
InstallAttempt — the per-strategy outcome record.

One attempt is appended to the session for every catalog entry the
chain reaches. Strategies never raise out of the chain; whatever
happened to them ends up here as skipped, failed or succeeded.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InstallAttempt(BaseModel):
    """Result of running (or declining to run) one install strategy."""

    strategy_id: str
    outcome: Literal["skipped", "failed", "succeeded"]
    reason: str = ""
    timestamp: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the strategy installed a verified artifact."""
        return self.outcome == "succeeded"

    @property
    def failed(self) -> bool:
        return self.outcome == "failed"

    @property
    def skipped(self) -> bool:
        return self.outcome == "skipped"

    @classmethod
    def success(cls, strategy_id: str, reason: str = "", **kwargs: Any) -> InstallAttempt:
        """Create a succeeded attempt."""
        return cls(strategy_id=strategy_id, outcome="succeeded", reason=reason, **kwargs)

    @classmethod
    def failure(cls, strategy_id: str, reason: str, **kwargs: Any) -> InstallAttempt:
        """Create a failed attempt."""
        return cls(strategy_id=strategy_id, outcome="failed", reason=reason, **kwargs)

    @classmethod
    def skip(cls, strategy_id: str, reason: str = "", **kwargs: Any) -> InstallAttempt:
        """Create a skipped attempt (precondition unmet)."""
        return cls(strategy_id=strategy_id, outcome="skipped", reason=reason, **kwargs)
