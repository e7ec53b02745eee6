"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where install commands are spawned. Strategies
and the verifier receive it as a callable so tests can substitute a
fake runner.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

_TAIL = 2000

Runner = Callable[..., dict[str, Any]]


def _tail(text: str | bytes | None) -> str:
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text[-_TAIL:]


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the child's whole session so pipelines die with it."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except PermissionError:
        logger.warning("Could not kill process group %d; killing pid only", proc.pid)
        proc.kill()


def run_command(
    cmd: list[str],
    *,
    timeout: float = 120,
    cwd: str | None = None,
) -> dict[str, Any]:
    """Run one argv command and capture its output.

    The child starts in its own session; on timeout the whole process
    group is killed, including anything it piped into or forked.

    Args:
        cmd: Command list for ``subprocess.Popen()``. Never a shell string.
        timeout: Seconds before the process group is killed.
        cwd: Working directory for the command.

    Returns:
        ``{"ok": True, "stdout": "...", "stderr": "...", "elapsed_ms": N}``
        on success, ``{"ok": False, "error": "...", ...}`` on failure.
        Timeouts also carry ``"timed_out": True``.
    """
    logger.debug("Running: %s (timeout=%ss, cwd=%s)", " ".join(cmd), timeout, cwd)
    start = time.monotonic()
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            cwd=cwd,
            start_new_session=True,
        )
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e)}

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(proc)
        stdout, stderr = proc.communicate()
        return {
            "ok": False,
            "timed_out": True,
            "error": f"Command timed out ({timeout:g}s)",
            "stdout": _tail(stdout),
            "stderr": _tail(stderr),
            "elapsed_ms": int((time.monotonic() - start) * 1000),
        }

    elapsed_ms = int((time.monotonic() - start) * 1000)

    if proc.returncode == 0:
        return {
            "ok": True,
            "stdout": _tail(stdout),
            "stderr": _tail(stderr),
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "returncode": proc.returncode,
        "error": f"Command failed (exit {proc.returncode})",
        "stderr": _tail(stderr),
        "stdout": _tail(stdout),
        "elapsed_ms": elapsed_ms,
    }
