"""
L0 Data — pure declarations, no I/O.
"""

from mato_installer.core.services.install.data.catalog import (  # noqa: F401
    STRATEGY_IDS,
    StrategyCatalog,
    build_catalog,
    check_preconditions,
    eligible,
    render_command,
    template_context,
)
