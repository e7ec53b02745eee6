"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from mato_installer.core.models import InstallSession, InstallStrategy, VersionQuery
"""

from mato_installer.core.models.attempt import InstallAttempt
from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.page_state import (
    PageState,
    TabSelected,
    VersionResolved,
    reduce_page_state,
)
from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.models.session import (
    Attempting,
    ChainState,
    Exhausted,
    InstallSession,
    Pending,
    Succeeded,
    Verifying,
)
from mato_installer.core.models.strategy import InstallStrategy
from mato_installer.core.models.version import UNKNOWN_VERSION, VersionQuery

__all__ = [
    # session.py
    "Attempting",
    "ChainState",
    "Exhausted",
    # attempt.py
    "InstallAttempt",
    "InstallSession",
    # strategy.py
    "InstallStrategy",
    # config.py
    "InstallerConfig",
    # page_state.py
    "PageState",
    "Pending",
    # platform.py
    "PlatformInfo",
    "Succeeded",
    "TabSelected",
    # version.py
    "UNKNOWN_VERSION",
    "VersionQuery",
    "VersionResolved",
    "Verifying",
    "reduce_page_state",
]
