"""
mato-install — CLI entrypoint.

Usage:
    mato-install install
    mato-install version --timeout 2
    mato-install strategies
    mato-install prompt --for human
    mato-install config check

stdout carries only the transcript (or JSON); logs go to stderr.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mato_installer import __version__
from mato_installer.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    level_from_flags,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="mato-install")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to mato-install.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Install mato with an ordered, verified fallback chain."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=level_from_flags(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


def _load_config(ctx: click.Context):
    """Load configuration or exit 2 with the reason on stderr."""
    from mato_installer.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)


# ── install ─────────────────────────────────────────────────────


@cli.command()
@click.option("--force", is_flag=True, help="Run the chain even if mato is already installed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, force: bool, as_json: bool) -> None:
    """Install mato, trying each strategy until one verifies.

    Exit codes: 0 installed, 1 every strategy failed, 2 unsupported
    platform or invalid configuration.
    """
    from mato_installer.core.services.install.orchestration.report import (
        render_attempt,
        render_status,
    )
    from mato_installer.core.use_cases.install import run_install

    config = _load_config(ctx)

    # stream attempt lines as they happen; long builds stay visible
    on_attempt = None if as_json else (lambda a: click.echo(render_attempt(a)))
    result = run_install(config, force=force, on_attempt=on_attempt)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.session is None:
        for line in result.transcript():
            click.echo(line)
    else:
        click.echo(render_status(result.session))

    sys.exit(result.exit_code)


# ── version ─────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for the lookup (default: version_timeout from config).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def version(ctx: click.Context, timeout: float | None, as_json: bool) -> None:
    """Show the published version and its release link."""
    from mato_installer.core.use_cases.published import lookup_published_version

    config = _load_config(ctx)
    result = lookup_published_version(config, timeout=timeout)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for line in result.transcript():
        click.echo(line)


# ── strategies ──────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def strategies(ctx: click.Context, as_json: bool) -> None:
    """List install strategies in the order they are tried."""
    from mato_installer.core.services.install.data.catalog import (
        build_catalog,
        check_preconditions,
    )
    from mato_installer.core.services.install.detection.platform import detect_platform
    from mato_installer.core.services.install.errors import (
        EnvironmentUnknown,
        PreconditionUnmet,
    )

    config = _load_config(ctx)
    try:
        platform = detect_platform()
    except EnvironmentUnknown as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    rows = []
    for entry in build_catalog(config):
        try:
            check_preconditions(entry, platform)
            reason = ""
        except PreconditionUnmet as e:
            reason = str(e)
        rows.append({
            "id": entry.id,
            "priority": entry.priority,
            "label": entry.display_name,
            "eligible": not reason,
            "reason": reason,
            "timeout": entry.timeout,
        })

    if as_json:
        click.echo(json.dumps({"platform": str(platform), "strategies": rows}, indent=2))
        return

    if not ctx.obj.get("quiet"):
        click.secho(f"\n🔧 Install strategies for {platform}", fg="cyan", bold=True)
    for row in rows:
        marker = click.style("✓", fg="green") if row["eligible"] else click.style("✗", fg="red")
        note = "" if row["eligible"] else f"  ({row['reason']})"
        click.echo(f"   {row['priority']}. {marker} {row['id']:<15} {row['label']}{note}")
    click.echo()


# ── prompt ──────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--for",
    "audience",
    type=click.Choice(["agent", "human"]),
    default="agent",
    show_default=True,
    help="Who will follow the instructions.",
)
@click.pass_context
def prompt(ctx: click.Context, audience: str) -> None:
    """Print install instructions for a coding agent or a person."""
    from mato_installer.core.models.page_state import PageState, TabSelected, reduce_page_state
    from mato_installer.core.services.install.orchestration.agent_prompt import (
        render_agent_prompt,
        render_human_instructions,
    )

    config = _load_config(ctx)
    page = reduce_page_state(PageState(), TabSelected(tab=audience))

    if page.selected_tab == "agent":
        click.echo(render_agent_prompt(config))
    else:
        click.echo(render_human_instructions(config))


# ── config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Installer configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate mato-install.yml."""
    from mato_installer.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 2)

    cfg = result.config
    if result.valid and cfg is not None:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        click.echo(f"   Artifact: {cfg.artifact} ({cfg.repository})")
        if cfg.disabled:
            click.echo(f"   Disabled: {', '.join(cfg.disabled)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(2)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
