"""CLI — click-based command-line interface."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from nxaffected.affected import get_affected_apps
from nxaffected.config import LOG_LEVELS, NxAffectedConfig, load_config
from nxaffected.errors import NxAffectedError
from nxaffected.locator import detect_package_manager, locate_nx
from nxaffected.logging import setup_logging
from nxaffected.models import AffectedResult
from nxaffected.report import render_json, render_text, write_github_output


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(),
              help="Explicit config file (skips .nxaffected.yml lookup).")
@click.option("--log-level", "log_level", default=None,
              type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
              help="Log level (overrides NXAFFECTED_LOG_LEVEL and config).")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """nxaffected — list the Nx apps affected by a change."""
    ctx.obj = {"config_path": config_path, "log_level": log_level}


def _bootstrap(opts: dict, cwd: str) -> NxAffectedConfig:
    """Load config for the workspace at *cwd* and configure logging."""
    cfg = load_config(project_path=cwd, config_path=opts.get("config_path"))
    setup_logging(
        opts.get("log_level"),
        configured_level=cfg.logging.level,
        configured_format=cfg.logging.format,
    )
    return cfg


# ───────────────────────────────────────────────────────────────────
# affected
# ───────────────────────────────────────────────────────────────────

@main.command()
@click.option("--base", "base", default=None,
              help="Base commit sha; empty means every app (--all).")
@click.option("--cwd", "cwd", default=".", type=click.Path(exists=True, file_okay=False),
              help="Workspace root holding package.json and the lock file.")
@click.option("--manifest", "manifest", default=None, type=click.Path(),
              help="Manifest path (default: <cwd>/package.json).")
@click.option("--format", "fmt", default=None,
              type=click.Choice(["text", "json"], case_sensitive=False),
              help="Output format.")
@click.option("--github-output/--no-github-output", "github_output", default=None,
              help="Write step outputs to $GITHUB_OUTPUT (default: when set).")
@click.pass_obj
def affected(
    opts: dict,
    base: str | None,
    cwd: str,
    manifest: str | None,
    fmt: str | None,
    github_output: bool | None,
) -> None:
    """Print the apps affected since BASE."""
    cfg = _bootstrap(opts, cwd)
    effective_base = base if base is not None else cfg.affected.base
    effective_fmt = (fmt or cfg.affected.format).lower()
    manifest_path = Path(manifest) if manifest else Path(cwd) / cfg.affected.manifest

    try:
        nx = locate_nx(cwd, manifest_path=manifest_path)
        apps = get_affected_apps(effective_base, nx)
    except NxAffectedError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    result = AffectedResult(
        package_manager=nx.program,
        base=effective_base or None,
        apps=apps,
    )

    if effective_fmt == "json":
        output = render_json(result)
    else:
        output = render_text(result)
    if output:
        click.echo(output)

    target = os.environ.get("GITHUB_OUTPUT")
    if github_output is None:
        github_output = bool(target)
    if github_output:
        if not target:
            click.echo("Error: --github-output given but $GITHUB_OUTPUT is not set.", err=True)
            sys.exit(1)
        write_github_output(result, target)


# ───────────────────────────────────────────────────────────────────
# detect
# ───────────────────────────────────────────────────────────────────

@main.command()
@click.option("--cwd", "cwd", default=".", type=click.Path(exists=True, file_okay=False),
              help="Directory to probe for lock files.")
@click.pass_obj
def detect(opts: dict, cwd: str) -> None:
    """Print the package manager detected from lock files."""
    _bootstrap(opts, cwd)
    descriptor = detect_package_manager(cwd)
    if descriptor is None:
        click.echo("Error: no package-lock.json, yarn.lock or pnpm-lock.yaml found.", err=True)
        sys.exit(1)
    click.echo(descriptor.name)
