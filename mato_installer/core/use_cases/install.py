"""
Install use case — one invocation of the resolution engine.

Detect the platform, short-circuit if a verified artifact is already
installed, otherwise walk the fallback chain. The published-version
lookup runs alongside on a daemon thread and is never waited on.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.models.session import InstallSession, Succeeded
from mato_installer.core.models.version import VersionQuery
from mato_installer.core.services.install.data.catalog import StrategyCatalog, build_catalog
from mato_installer.core.services.install.detection.capabilities import (
    Which,
    choose_install_dir,
    locate_artifact,
    search_dirs,
)
from mato_installer.core.services.install.detection.platform import detect_platform
from mato_installer.core.services.install.detection.published_version import VersionResolver
from mato_installer.core.services.install.errors import EnvironmentUnknown, VerificationFailure
from mato_installer.core.services.install.execution.subprocess_runner import (
    Runner,
    run_command,
)
from mato_installer.core.services.install.execution.verify import verify_artifact
from mato_installer.core.services.install.orchestration.chain import (
    AttemptCallback,
    ChainExecutor,
    Locator,
    Verifier,
)
from mato_installer.core.services.install.orchestration.report import (
    render_environment_error,
    render_session,
    session_to_dict,
)

logger = logging.getLogger(__name__)

EXIT_INSTALLED = 0
EXIT_EXHAUSTED = 1
EXIT_ENVIRONMENT = 2


@dataclass
class InstallResult:
    """Result of an install invocation."""

    session: InstallSession | None = None
    platform: PlatformInfo | None = None
    install_dir: Path | None = None
    version_query: VersionQuery | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error is not None or self.session is None:
            return EXIT_ENVIRONMENT
        return EXIT_INSTALLED if self.session.succeeded else EXIT_EXHAUSTED

    def transcript(self) -> list[str]:
        if self.error is not None or self.session is None:
            return render_environment_error(self.error or "platform not detected")
        return render_session(self.session)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"exit_code": self.exit_code}
        if self.error is not None:
            result["error"] = "environment_unknown"
            result["detail"] = self.error
            result["status"] = "failed"
            return result

        result["platform"] = {"os": self.platform.os, "arch": self.platform.arch} if self.platform else None
        result["install_dir"] = str(self.install_dir) if self.install_dir else None
        if self.session is not None:
            result.update(session_to_dict(self.session))
        if self.version_query is not None:
            result["published_version"] = self.version_query.value
        return result


def probe_existing(
    config: InstallerConfig,
    install_dir: Path,
    *,
    runner: Runner = run_command,
    verifier: Verifier = verify_artifact,
    locator: Locator = locate_artifact,
    which: Which = shutil.which,
) -> tuple[Path, str] | None:
    """Find an installed artifact that passes verification.

    Returns:
        ``(path, version)`` for an operable artifact, else ``None``.
    """
    found = locator(config.artifact, dirs=search_dirs(install_dir), which=which)
    if found is None:
        logger.debug("No existing %s found", config.artifact)
        return None
    try:
        version = verifier(found, timeout=config.verify_timeout, runner=runner)
    except VerificationFailure as e:
        logger.info("Existing %s is not operable, reinstalling: %s", found, e)
        return None
    return found, version


def run_install(
    config: InstallerConfig | None = None,
    *,
    force: bool = False,
    catalog: StrategyCatalog | None = None,
    detector: Callable[[], PlatformInfo] = detect_platform,
    runner: Runner = run_command,
    verifier: Verifier = verify_artifact,
    locator: Locator = locate_artifact,
    which: Which = shutil.which,
    resolver: VersionResolver | None = None,
    on_attempt: AttemptCallback | None = None,
) -> InstallResult:
    """Install the artifact unless a verified copy is already present.

    Args:
        config: Installer settings (defaults when None).
        force: Skip the already-installed probe and run the chain.
        catalog: Strategy catalog override (default: built from config).
        on_attempt: Called with each attempt as soon as it is recorded.

    Returns:
        InstallResult; ``exit_code`` is 0 installed, 1 exhausted,
        2 environment unknown.
    """
    config = config or InstallerConfig()
    result = InstallResult()

    try:
        platform = detector()
    except EnvironmentUnknown as e:
        logger.error("%s", e)
        result.error = str(e)
        return result
    result.platform = platform

    if resolver is None and config.version_check:
        resolver = VersionResolver(config.version_url, timeout=config.version_timeout)
    if resolver is not None:
        resolver.start()

    install_dir = choose_install_dir(config.install_dir)
    result.install_dir = install_dir
    session = InstallSession()
    result.session = session

    existing = None
    if not force:
        existing = probe_existing(
            config, install_dir,
            runner=runner, verifier=verifier, locator=locator, which=which,
        )

    if existing is not None:
        path, version = existing
        logger.info("%s %s already installed at %s", config.artifact, version, path)
        session.advance(Succeeded(version=version, artifact=str(path), already_installed=True))
    else:
        executor = ChainExecutor(
            config,
            install_dir=install_dir,
            runner=runner,
            verifier=verifier,
            locator=locator,
            which=which,
            on_attempt=on_attempt,
        )
        executor.run(catalog if catalog is not None else build_catalog(config), platform, session)

    if resolver is not None:
        result.version_query = resolver.current
        logger.debug("Published version at exit: %s", result.version_query.value)
    return result
