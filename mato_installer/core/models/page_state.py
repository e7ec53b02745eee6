"""
PageState — transient install-page state as an explicit reducer.

Two pieces of state live here: which install tab is selected
("agent" or "human") and the version shown on the badge. The badge
version starts at the sentinel and is assigned at most once, by the
first successful ``VersionResolved``; later resolutions are ignored.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from mato_installer.core.models.version import UNKNOWN_VERSION

Tab = Literal["agent", "human"]


class PageState(BaseModel):
    """Immutable page state; produce new values with ``reduce_page_state``."""

    model_config = ConfigDict(frozen=True)

    selected_tab: Tab = "agent"
    version: str = UNKNOWN_VERSION

    def badge_label(self, product: str = "Mato") -> str:
        return f"{product} v{self.version}: Multi-Agent Terminal Office"


class TabSelected(BaseModel):
    model_config = ConfigDict(frozen=True)

    tab: Tab


class VersionResolved(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str


PageAction = Union[TabSelected, VersionResolved]


def reduce_page_state(state: PageState, action: PageAction) -> PageState:
    """Apply one action and return the next state."""
    if isinstance(action, TabSelected):
        if action.tab == state.selected_tab:
            return state
        return state.model_copy(update={"selected_tab": action.tab})

    if isinstance(action, VersionResolved):
        value = action.version.strip()
        if state.version != UNKNOWN_VERSION or not value or value == UNKNOWN_VERSION:
            return state
        return state.model_copy(update={"version": value})

    raise TypeError(f"Unknown page action: {type(action).__name__}")
