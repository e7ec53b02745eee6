"""
L5 Orchestration — Install instructions for agents and humans.

The same catalog the chain executes is rendered as text:

- ``render_agent_prompt`` — a numbered fallback plan a coding agent
  can follow step by step, ending with the verification command.
- ``render_human_instructions`` — the short copy-paste commands.

Generating both from the catalog keeps the prose and the executable
chain from drifting apart.
"""

from __future__ import annotations

import shlex

from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.services.install.data.catalog import (
    StrategyCatalog,
    build_catalog,
    render_command,
    template_context,
)
from mato_installer.core.services.install.detection.capabilities import SYSTEM_BIN_DIR

_HEADINGS = {
    "script": "Primary install path (official install script)",
    "homebrew": "If that fails, fallback A (Homebrew)",
    "release-binary": "If Homebrew is unavailable/fails, fallback B (GitHub release binary)",
    "source": "If binary install also fails, fallback C (build from source)",
}

HOMEBREW_URL = "https://brew.sh/"


def _shell(cmd: list[str]) -> str:
    return shlex.join(cmd)


def _display_context(config: InstallerConfig, platform: PlatformInfo | None) -> dict[str, str]:
    return template_context(
        config, platform,
        install_dir=str(SYSTEM_BIN_DIR),
        workdir=".",
    )


def render_agent_prompt(
    config: InstallerConfig | None = None,
    catalog: StrategyCatalog | None = None,
    platform: PlatformInfo | None = None,
) -> str:
    """Numbered fallback plan covering every enabled strategy in order."""
    config = config or InstallerConfig()
    catalog = catalog if catalog is not None else build_catalog(config)
    ctx = _display_context(config, platform)
    name = config.artifact

    lines = [f"Install {name.capitalize()} on this machine and verify it works.", "", "Steps:"]
    step = 0
    for entry in catalog:
        if not entry.enabled:
            continue
        step += 1
        heading = _HEADINGS.get(entry.id, f"Fallback: {entry.display_name}")
        lines.append(f"{step}) {heading}:")
        for template in entry.commands:
            lines.append(f"   - {_shell(render_command(template, ctx))}")
        if entry.artifact_path:
            lines.append(f"   - without sudo, use ~/.local/bin instead of {SYSTEM_BIN_DIR}")

    step += 1
    lines.append(f"{step}) Verification:")
    lines.append(f"   - run: {name} --version")
    step += 1
    lines.append(
        f"{step}) If any step fails, explain the exact failure and continue "
        "with the next fallback automatically."
    )
    return "\n".join(lines)


def render_human_instructions(
    config: InstallerConfig | None = None,
    catalog: StrategyCatalog | None = None,
) -> str:
    """Quick-install and Homebrew commands for a person at a terminal."""
    config = config or InstallerConfig()
    catalog = catalog if catalog is not None else build_catalog(config)
    ctx = _display_context(config, None)

    sections: list[str] = []
    script = catalog.get("script")
    if script is not None and script.enabled:
        sections.append("# Quick Install (Linux/macOS)")
        # present the pipeline itself, not the bash -c wrapper
        sections.append(f"curl -fsSL {config.script_url} | bash")
    brew = catalog.get("homebrew")
    if brew is not None and brew.enabled:
        if sections:
            sections.append("")
        sections.append("# Homebrew (Linux/macOS)")
        sections.extend(_shell(render_command(t, ctx)) for t in brew.commands)
        sections.append(f"# Homebrew works on Linux and macOS. Install Homebrew first: {HOMEBREW_URL}")
    if not sections:
        sections.append(f"# Download a release: https://github.com/{config.repository}/releases/latest")
    return "\n".join(sections)
