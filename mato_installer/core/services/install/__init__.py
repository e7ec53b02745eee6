"""
Install resolution engine — layered package.

    L0 data/           strategy catalog (pure declarations)
    L3 detection/      platform, capabilities, published version (read-only)
    L4 execution/      subprocess runner, artifact verification
    L5 orchestration/  fallback chain, transcript, instructions

Import from here for the public surface:

    from mato_installer.core.services.install import ChainExecutor, build_catalog
"""

from mato_installer.core.services.install.data import (  # noqa: F401
    STRATEGY_IDS,
    StrategyCatalog,
    build_catalog,
    check_preconditions,
    eligible,
)
from mato_installer.core.services.install.detection import (  # noqa: F401
    VersionFetch,
    VersionResolver,
    choose_install_dir,
    detect_platform,
    fetch_published_version,
    locate_artifact,
    release_url,
    search_dirs,
)
from mato_installer.core.services.install.errors import (  # noqa: F401
    EnvironmentUnknown,
    ExecutionFailure,
    Exhaustion,
    InstallError,
    NetworkFailure,
    PreconditionUnmet,
    VerificationFailure,
)
from mato_installer.core.services.install.execution import (  # noqa: F401
    run_command,
    verify_artifact,
)
from mato_installer.core.services.install.orchestration import (  # noqa: F401
    ChainExecutor,
    raise_for_outcome,
    render_agent_prompt,
    render_environment_error,
    render_human_instructions,
    render_session,
    render_version_query,
    session_to_dict,
)
