"""
L5 Orchestration — the chain executor and everything that renders its result.
"""

from mato_installer.core.services.install.orchestration.agent_prompt import (  # noqa: F401
    render_agent_prompt,
    render_human_instructions,
)
from mato_installer.core.services.install.orchestration.chain import (  # noqa: F401
    ChainExecutor,
    raise_for_outcome,
)
from mato_installer.core.services.install.orchestration.report import (  # noqa: F401
    render_attempt,
    render_environment_error,
    render_session,
    render_status,
    render_version_query,
    session_to_dict,
)
