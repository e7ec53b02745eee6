"""
L4 Execution — Artifact operability check.

An artifact counts as installed only when ``<artifact> --version``
exits 0 within the verify timeout. The version token is parsed the
same way the published version is, but a binary that prints no
recognizable version still passes; it just reports ``"unknown"``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from mato_installer.core.models.version import UNKNOWN_VERSION
from mato_installer.core.services.install.errors import VerificationFailure
from mato_installer.core.services.install.execution.subprocess_runner import (
    Runner,
    run_command,
)

logger = logging.getLogger(__name__)

VERSION_TOKEN_RE = re.compile(r"\bv?(\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?)\b")


def parse_version_output(output: str) -> str:
    """First semantic version in ``output``, or the sentinel."""
    match = VERSION_TOKEN_RE.search(output or "")
    return match.group(1) if match else UNKNOWN_VERSION


def verify_artifact(
    artifact: Path | str,
    *,
    timeout: float = 15.0,
    runner: Runner = run_command,
) -> str:
    """Run ``<artifact> --version`` and return the reported version.

    Raises:
        VerificationFailure: If the artifact is missing, exits non-zero,
            or does not answer within ``timeout``.
    """
    path = str(artifact)
    result = runner([path, "--version"], timeout=timeout)
    if not result.get("ok"):
        detail = result.get("error", "version check failed")
        stderr = (result.get("stderr") or "").strip()
        if stderr:
            detail = f"{detail}: {stderr.splitlines()[-1]}"
        raise VerificationFailure(f"{path} --version: {detail}")

    version = parse_version_output(
        f"{result.get('stdout', '')}\n{result.get('stderr', '')}"
    )
    logger.debug("Verified %s (version %s)", path, version)
    return version
