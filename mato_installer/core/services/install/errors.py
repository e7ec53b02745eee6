"""
Install errors — the failure taxonomy of the resolution engine.

Only ``EnvironmentUnknown`` and ``Exhaustion`` end a run. The others
are raised inside the chain and folded into attempts by the executor,
or (``NetworkFailure``) recovered to the version sentinel.
"""

from __future__ import annotations


class InstallError(Exception):
    """Base error for install resolution."""


class PreconditionUnmet(InstallError):
    """A strategy's capability requirement is absent; recorded as skipped."""


class ExecutionFailure(InstallError):
    """A strategy ran but failed, timed out, or produced no artifact."""


class VerificationFailure(InstallError):
    """The artifact is present but failed its operability check."""


class NetworkFailure(InstallError):
    """The published version could not be fetched or parsed."""


class Exhaustion(InstallError):
    """Every eligible strategy failed."""

    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        summary = "; ".join(self.reasons) if self.reasons else "no eligible strategy"
        super().__init__(f"All install strategies exhausted: {summary}")


class EnvironmentUnknown(InstallError):
    """The host OS or architecture is outside the supported set."""
