"""
VersionQuery — the published-version lookup and its sentinel.
"""

from __future__ import annotations

from pydantic import BaseModel

UNKNOWN_VERSION = "unknown"
"""Sentinel for a version that could not be resolved."""


class VersionQuery(BaseModel):
    """Outcome of fetching the published version string.

    ``value`` is always defined: a semantic version, or the sentinel
    while pending or after any failure.
    """

    source: str
    value: str = UNKNOWN_VERSION
    resolved_at: str | None = None
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return self.value != UNKNOWN_VERSION
