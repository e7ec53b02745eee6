"""
L5 Orchestration — The fallback chain.

Walks the catalog in declaration order, one strategy at a time:

    Attempting(i) ── precondition unmet ──→ skipped, next
          │
          ├── command fails / times out / no artifact ──→ failed, next
          │
          └── Verifying(i) ── rejected ──→ failed, next
                    │
                    └── confirmed ──→ Succeeded (stop)

The first verified strategy wins. Running off the end of the catalog
ends the session as Exhausted. Non-terminal errors never leave this
module; they become attempts.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from mato_installer.core.models.attempt import InstallAttempt
from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.models.session import (
    Attempting,
    Exhausted,
    InstallSession,
    Succeeded,
    Verifying,
)
from mato_installer.core.models.strategy import InstallStrategy
from mato_installer.core.services.install.data.catalog import (
    StrategyCatalog,
    check_preconditions,
    render_command,
    template_context,
)
from mato_installer.core.services.install.detection.capabilities import (
    Which,
    locate_artifact,
    search_dirs,
)
from mato_installer.core.services.install.errors import (
    ExecutionFailure,
    Exhaustion,
    PreconditionUnmet,
    VerificationFailure,
)
from mato_installer.core.services.install.execution.subprocess_runner import (
    Runner,
    run_command,
)
from mato_installer.core.services.install.execution.verify import verify_artifact

logger = logging.getLogger(__name__)

Verifier = Callable[..., str]
Locator = Callable[..., "Path | None"]
AttemptCallback = Callable[[InstallAttempt], None]


def _one_line(text: str) -> str:
    lines = [ln.strip() for ln in (text or "").splitlines() if ln.strip()]
    return lines[-1] if lines else ""


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class ChainExecutor:
    """Run strategies until one installs a verified artifact.

    Every collaborator that touches the host (command runner, verifier,
    artifact locator, PATH lookup) is injectable.
    """

    def __init__(
        self,
        config: InstallerConfig | None = None,
        *,
        install_dir: Path,
        runner: Runner = run_command,
        verifier: Verifier = verify_artifact,
        locator: Locator = locate_artifact,
        which: Which = shutil.which,
        on_attempt: AttemptCallback | None = None,
    ):
        self.config = config or InstallerConfig()
        self.install_dir = Path(install_dir)
        self._runner = runner
        self._verifier = verifier
        self._locator = locator
        self._which = which
        self._on_attempt = on_attempt

    def run(
        self,
        catalog: StrategyCatalog,
        platform: PlatformInfo,
        session: InstallSession | None = None,
    ) -> InstallSession:
        """Drive ``session`` (a fresh one by default) to a terminal state."""
        session = session or InstallSession()
        logger.info(
            "Session %s: %d strategies for %s", session.session_id, len(catalog), platform,
        )

        for position, entry in enumerate(catalog, start=1):
            session.advance(Attempting(position=position, strategy_id=entry.id))
            start = time.monotonic()

            try:
                check_preconditions(entry, platform, which=self._which)
            except PreconditionUnmet as e:
                logger.info("Skipping %s: %s", entry.id, e)
                self._record(session, InstallAttempt.skip(entry.id, str(e)))
                continue

            try:
                artifact = self._execute(entry, platform)
                session.advance(Verifying(
                    position=position, strategy_id=entry.id, artifact=str(artifact),
                ))
                version = self._verifier(
                    artifact, timeout=self.config.verify_timeout, runner=self._runner,
                )
            except (ExecutionFailure, VerificationFailure) as e:
                logger.warning("Strategy %s failed: %s", entry.id, e)
                self._record(session, InstallAttempt.failure(
                    entry.id, str(e), duration_ms=_elapsed_ms(start),
                ))
                continue

            self._record(session, InstallAttempt.success(
                entry.id,
                f"installed {version} at {artifact}",
                duration_ms=_elapsed_ms(start),
                metadata={"version": version, "artifact": str(artifact)},
            ))
            session.advance(Succeeded(
                version=version, strategy_id=entry.id, artifact=str(artifact),
            ))
            logger.info("Installed %s %s via %s", self.config.artifact, version, entry.id)
            return session

        session.exhaust()
        logger.warning(
            "No strategy installed %s (%d failed, %d skipped)",
            self.config.artifact, session.failed_count, session.skipped_count,
        )
        return session

    def _record(self, session: InstallSession, attempt: InstallAttempt) -> None:
        session.record(attempt)
        if self._on_attempt is not None:
            self._on_attempt(attempt)

    def _execute(self, entry: InstallStrategy, platform: PlatformInfo) -> Path:
        """Run every command of ``entry`` and return the artifact it produced.

        Raises:
            ExecutionFailure: Nonzero exit, deadline exceeded, or no artifact.
        """
        deadline = time.monotonic() + entry.timeout
        total = len(entry.commands)

        with tempfile.TemporaryDirectory(prefix="mato-install-") as workdir:
            ctx = template_context(
                self.config, platform,
                install_dir=str(self.install_dir), workdir=workdir,
            )
            for step, template in enumerate(entry.commands, start=1):
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ExecutionFailure(f"timed out after {entry.timeout}s")

                cmd = render_command(template, ctx)
                logger.debug("%s step %d/%d: %s", entry.id, step, total, " ".join(cmd))
                result = self._runner(cmd, timeout=remaining, cwd=workdir)
                if result.get("ok"):
                    continue

                if result.get("timed_out"):
                    raise ExecutionFailure(
                        f"step {step}/{total} ({cmd[0]}) timed out after {entry.timeout}s"
                    )
                detail = result.get("error", "command failed")
                stderr = _one_line(result.get("stderr", ""))
                if stderr:
                    detail = f"{detail}: {stderr}"
                raise ExecutionFailure(f"step {step}/{total} ({cmd[0]}) {detail}")

            expected = (
                Path(entry.artifact_path.format_map(ctx)) if entry.artifact_path else None
            )

        found = self._locator(
            self.config.artifact,
            expected=expected,
            dirs=search_dirs(self.install_dir),
            which=self._which,
        )
        if found is None:
            where = str(expected) if expected else "PATH or known install dirs"
            raise ExecutionFailure(
                f"completed but {self.config.artifact} not found in {where}"
            )
        return found


def raise_for_outcome(session: InstallSession) -> Succeeded:
    """Return the Succeeded outcome, or raise if the chain was exhausted.

    Raises:
        Exhaustion: If the session ended Exhausted.
        ValueError: If the session has not reached a terminal state.
    """
    outcome = session.outcome
    if isinstance(outcome, Exhausted):
        raise Exhaustion(outcome.reasons)
    if outcome is None:
        raise ValueError(f"Session {session.session_id} is still {session.state.label}")
    return outcome
