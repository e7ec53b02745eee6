"""
L3 Detection — read-only probes of the host and the release channel.
"""

from mato_installer.core.services.install.detection.capabilities import (  # noqa: F401
    choose_install_dir,
    locate_artifact,
    missing_binaries,
    search_dirs,
)
from mato_installer.core.services.install.detection.platform import (  # noqa: F401
    detect_platform,
)
from mato_installer.core.services.install.detection.published_version import (  # noqa: F401
    VersionFetch,
    VersionResolver,
    fetch_published_version,
    release_url,
)
