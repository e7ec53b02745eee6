"""
InstallSession — one end-to-end run of the resolution engine.

The chain position is a tagged variant (``kind`` discriminator) rather
than a bundle of flags:

    Pending → Attempting(i) → Verifying(i) → Succeeded
                   │               │
                   └──→ Attempting(i+1) ←──┘   …   → Exhausted

Every state entered is appended to ``history`` so a finished session
can be replayed and checked. Terminal states (Succeeded, Exhausted)
accept no further transitions.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from mato_installer.core.models.attempt import InstallAttempt


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


# ── Chain states ────────────────────────────────────────────────


class Pending(BaseModel):
    """Session created, no strategy touched yet."""

    kind: Literal["pending"] = "pending"

    @property
    def label(self) -> str:
        return "Pending"


class Attempting(BaseModel):
    """Catalog entry ``position`` (1-based) is being considered."""

    kind: Literal["attempting"] = "attempting"
    position: int
    strategy_id: str

    @property
    def label(self) -> str:
        return f"Attempting({self.position})"


class Verifying(BaseModel):
    """A strategy ran cleanly; its artifact is being checked."""

    kind: Literal["verifying"] = "verifying"
    position: int
    strategy_id: str
    artifact: str

    @property
    def label(self) -> str:
        return f"Verifying({self.position})"


class Succeeded(BaseModel):
    """Terminal: a verified artifact is installed."""

    kind: Literal["succeeded"] = "succeeded"
    version: str
    strategy_id: str | None = None
    artifact: str | None = None
    already_installed: bool = False

    @property
    def label(self) -> str:
        return "Succeeded"


class Exhausted(BaseModel):
    """Terminal: every eligible strategy was tried and failed."""

    kind: Literal["exhausted"] = "exhausted"
    reasons: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return "Exhausted"


ChainState = Annotated[
    Union[Pending, Attempting, Verifying, Succeeded, Exhausted],
    Field(discriminator="kind"),
]

TERMINAL_KINDS = frozenset({"succeeded", "exhausted"})

# kind → kinds it may move to
_ALLOWED: dict[str, frozenset[str]] = {
    "pending": frozenset({"attempting", "succeeded", "exhausted"}),
    "attempting": frozenset({"attempting", "verifying", "exhausted"}),
    "verifying": frozenset({"attempting", "succeeded", "exhausted"}),
    "succeeded": frozenset(),
    "exhausted": frozenset(),
}


def _new_session_id() -> str:
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return f"install-{now}-{uuid.uuid4().hex[:6]}"


class InstallSession(BaseModel):
    """Ordered attempts plus the current chain state.

    Mutated only through ``advance`` and ``record`` (called by the chain
    executor), then handed to the report emitter and discarded.
    """

    session_id: str = Field(default_factory=_new_session_id)
    started_at: str = Field(default_factory=_now_iso)
    ended_at: str | None = None

    state: ChainState = Field(default_factory=Pending)
    history: list[ChainState] = Field(default_factory=lambda: [Pending()])
    attempts: list[InstallAttempt] = Field(default_factory=list)

    # ── Transitions ──────────────────────────────────────────────

    def advance(self, new_state: Pending | Attempting | Verifying | Succeeded | Exhausted) -> None:
        """Move to ``new_state``.

        Raises:
            ValueError: If the transition is not part of the chain.
        """
        if new_state.kind not in _ALLOWED[self.state.kind]:
            raise ValueError(
                f"Invalid session transition: {self.state.label} → {new_state.label}"
            )
        self.state = new_state
        self.history.append(new_state)
        if new_state.kind in TERMINAL_KINDS:
            self.ended_at = _now_iso()

    def record(self, attempt: InstallAttempt) -> None:
        """Append an attempt outcome.

        Raises:
            ValueError: If the session already reached a terminal state.
        """
        if self.terminal:
            raise ValueError(
                f"Session {self.session_id} is {self.state.label}; "
                f"cannot record attempt for '{attempt.strategy_id}'"
            )
        self.attempts.append(attempt)

    def exhaust(self) -> None:
        """Terminate as Exhausted, aggregating failed reasons only."""
        reasons = [f"{a.strategy_id}: {a.reason}" for a in self.attempts if a.failed]
        self.advance(Exhausted(reasons=reasons))

    # ── Views ────────────────────────────────────────────────────

    @property
    def terminal(self) -> bool:
        return self.state.kind in TERMINAL_KINDS

    @property
    def succeeded(self) -> bool:
        return self.state.kind == "succeeded"

    @property
    def outcome(self) -> Succeeded | Exhausted | None:
        """The terminal outcome, or ``None`` while the chain is running."""
        if isinstance(self.state, (Succeeded, Exhausted)):
            return self.state
        return None

    @property
    def exit_code(self) -> int:
        """0 when installed, 1 otherwise."""
        return 0 if self.succeeded else 1

    @property
    def transitions(self) -> list[str]:
        """State labels in the order they were entered."""
        return [s.label for s in self.history]

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.attempts if a.failed)

    @property
    def skipped_count(self) -> int:
        return sum(1 for a in self.attempts if a.skipped)
