"""
L5 Orchestration — Transcript rendering.

The transcript is the contract with whoever runs the installer, human
or agent. Every line is self-contained ``key=value`` text, attempts
come in execution order, and exactly one ``status=`` line ends it:

    strategy=script result=fail detail=step 1/1 (bash) Command failed (exit 22)
    strategy=homebrew result=skip detail=requires brew on PATH
    strategy=release-binary result=ok detail=installed 0.4.1 at /usr/local/bin/mato
    status=installed:0.4.1
"""

from __future__ import annotations

from typing import Any

from mato_installer.core.models.attempt import InstallAttempt
from mato_installer.core.models.session import InstallSession, Succeeded
from mato_installer.core.models.version import VersionQuery
from mato_installer.core.services.install.detection.published_version import release_url

_RESULT_TOKENS = {
    "succeeded": "ok",
    "skipped": "skip",
    "failed": "fail",
}


def _detail(text: str | None) -> str:
    """Collapse whitespace so a detail never spans lines; empty → ``-``."""
    collapsed = " ".join((text or "").split())
    return collapsed or "-"


def render_attempt(attempt: InstallAttempt) -> str:
    return (
        f"strategy={attempt.strategy_id} "
        f"result={_RESULT_TOKENS[attempt.outcome]} "
        f"detail={_detail(attempt.reason)}"
    )


def render_status(session: InstallSession) -> str:
    """The terminal status line.

    Raises:
        ValueError: If the session is not terminal yet.
    """
    if not session.terminal:
        raise ValueError(f"Session {session.session_id} is still {session.state.label}")
    if isinstance(session.state, Succeeded):
        return f"status=installed:{session.state.version}"
    return "status=failed"


def render_session(session: InstallSession) -> list[str]:
    """One line per attempt, then the status line."""
    lines = [render_attempt(a) for a in session.attempts]
    lines.append(render_status(session))
    return lines


def render_environment_error(reason: str) -> list[str]:
    return [
        f"error=environment_unknown detail={_detail(reason)}",
        "status=failed",
    ]


def render_version_query(query: VersionQuery, repository: str) -> list[str]:
    return [
        f"source={query.source} resolved_at={query.resolved_at or '-'}",
        f"release={release_url(query.value, repository)}",
        f"status=version:{query.value}",
    ]


# ── JSON ────────────────────────────────────────────────────────


def session_to_dict(session: InstallSession) -> dict[str, Any]:
    """Serializable view of a finished session for ``--json`` output."""
    data: dict[str, Any] = {
        "session_id": session.session_id,
        "started_at": session.started_at,
        "ended_at": session.ended_at,
        "status": "installed" if session.succeeded else "failed",
        "exit_code": session.exit_code,
        "transitions": session.transitions,
        "attempts": [
            {
                "strategy": a.strategy_id,
                "result": _RESULT_TOKENS[a.outcome],
                "detail": a.reason,
                "timestamp": a.timestamp,
                "duration_ms": a.duration_ms,
            }
            for a in session.attempts
        ],
    }
    if session.outcome is not None:
        data["outcome"] = session.outcome.model_dump()
    return data
