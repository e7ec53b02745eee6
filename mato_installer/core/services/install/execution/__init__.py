"""
L4 Execution — functions that WRITE to the system or run its binaries.
"""

from mato_installer.core.services.install.execution.subprocess_runner import (  # noqa: F401
    Runner,
    run_command,
)
from mato_installer.core.services.install.execution.verify import (  # noqa: F401
    parse_version_output,
    verify_artifact,
)
