"""
Published version use case — the version badge and release link.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.page_state import PageState, VersionResolved, reduce_page_state
from mato_installer.core.models.version import VersionQuery
from mato_installer.core.services.install.detection.published_version import (
    VersionResolver,
    release_url,
)
from mato_installer.core.services.install.orchestration.report import render_version_query


@dataclass
class PublishedVersionResult:
    """Outcome of a bounded published-version lookup."""

    query: VersionQuery
    repository: str
    page: PageState = field(default_factory=PageState)

    @property
    def version(self) -> str:
        return self.page.version

    @property
    def release_url(self) -> str:
        return release_url(self.page.version, self.repository)

    def transcript(self) -> list[str]:
        return render_version_query(self.query, self.repository)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.query.source,
            "version": self.version,
            "resolved_at": self.query.resolved_at,
            "error": self.query.error,
            "release_url": self.release_url,
            "badge": self.page.badge_label(),
        }


def lookup_published_version(
    config: InstallerConfig | None = None,
    *,
    timeout: float | None = None,
    resolver: VersionResolver | None = None,
) -> PublishedVersionResult:
    """Resolve the published version, waiting at most ``timeout`` seconds.

    Never raises for network problems; the result then carries the
    ``"unknown"`` sentinel and a release link to the latest release.
    """
    config = config or InstallerConfig()
    resolver = resolver or VersionResolver(config.version_url, timeout=config.version_timeout)

    value = resolver.resolve(timeout)
    page = reduce_page_state(PageState(), VersionResolved(version=value))
    # a cancelled fetch leaves the resolver at its previous value
    query = resolver.current.model_copy(update={"value": page.version})
    return PublishedVersionResult(query=query, repository=config.repository, page=page)
