"""CLI entry point: ds-adoption.

Usage:
    ds-adoption -p /path/to/app [-o report.json] [-c config.json] [-i] [-v]
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from ds_adoption import __version__
from ds_adoption.batcher import DEFAULT_CONCURRENCY
from ds_adoption.config import load_config
from ds_adoption.core.logging import setup_logging
from ds_adoption.exceptions import RepositoryPathError
from ds_adoption.progress import PhaseStatus, ScanProgress
from ds_adoption.scanner import scan_repository

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "running": "~",
    "pending": ".",
}


def _echo_phase(p: PhaseStatus) -> None:
    icon = _STATUS_ICONS.get(p.status, "?")
    if p.status == "running" and p.total:
        click.echo(f"  [{icon}] {p.phase}: {p.done}/{p.total} files", err=True)
        return
    duration = f" ({p.duration}s)" if p.duration else ""
    detail = f" - {p.detail}" if p.detail else ""
    error = f" ERROR: {p.error}" if p.error else ""
    click.echo(f"  [{icon}] {p.phase}{duration}{detail}{error}", err=True)


@click.command()
@click.version_option(__version__)
@click.option("-p", "--path", "repo_path", required=True, help="Path to the Angular repository")
@click.option("-o", "--output", default=None, help="Output file path for the JSON report")
@click.option("-c", "--config", "config_path", default=None, help="Path to the configuration file")
@click.option("-i", "--incremental", is_flag=True, help="Scan only files changed since HEAD")
@click.option(
    "--concurrency",
    default=DEFAULT_CONCURRENCY,
    show_default=True,
    type=click.IntRange(min=1),
    help="Files analyzed concurrently per batch",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    repo_path: str,
    output: str | None,
    config_path: str | None,
    incremental: bool,
    concurrency: int,
    verbose: bool,
) -> None:
    """Design System Adoption Tracker: scan an Angular repository and report adoption."""
    setup_logging(verbose)
    config = load_config(Path(config_path).resolve() if config_path else None)

    progress = ScanProgress()
    progress.callbacks.append(_echo_phase)
    click.echo("Scanning repository...", err=True)

    try:
        report = asyncio.run(
            scan_repository(
                Path(repo_path),
                config=config,
                incremental=incremental,
                concurrency=concurrency,
                progress=progress,
            )
        )
    except RepositoryPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    rendered = json.dumps(report.to_dict(), indent=2)
    if output:
        output_path = Path(output).resolve()
        output_path.write_text(rendered + "\n")
        click.echo(f"Report saved to {output_path}", err=True)
    else:
        click.echo(rendered)
