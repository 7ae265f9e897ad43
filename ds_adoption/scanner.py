"""Scan pipeline: resolve files, analyze in batches, aggregate."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import structlog

from ds_adoption.analyzer import analyze_file
from ds_adoption.batcher import DEFAULT_CONCURRENCY, run_in_batches
from ds_adoption.config import DEFAULT_CONFIG, ScanConfiguration
from ds_adoption.exceptions import RepositoryPathError
from ds_adoption.file_set import resolve_file_set
from ds_adoption.models import ReportMetadata, ScanReport
from ds_adoption.progress import ScanProgress
from ds_adoption.resolver import ImportResolver, load_module_resolution
from ds_adoption.scoring import aggregate

log = structlog.get_logger("ds_adoption.scanner")


def validate_repo_path(repo_path: Path) -> Path:
    """Return the absolute repository root, or raise ``RepositoryPathError``."""
    if not repo_path.exists():
        raise RepositoryPathError(str(repo_path), "no such file or directory")
    if not repo_path.is_dir():
        raise RepositoryPathError(str(repo_path), "the provided path is not a directory")
    return repo_path.resolve()


async def scan_repository(
    repo_path: Path,
    config: ScanConfiguration | None = None,
    incremental: bool = False,
    concurrency: int = DEFAULT_CONCURRENCY,
    progress: ScanProgress | None = None,
) -> ScanReport:
    """Scan a repository and build the adoption report.

    An invalid *repo_path* is fatal. Per-file failures are logged and
    absorbed; anything else marks the running phase failed and propagates.
    """
    root = validate_repo_path(repo_path)
    config = config or DEFAULT_CONFIG
    progress = progress or ScanProgress()
    resolver = ImportResolver(load_module_resolution(root))

    phase = "resolve_files"
    try:
        progress.start(phase)
        files = await resolve_file_set(root, config, incremental)
        progress.complete(phase, detail=f"{len(files)} files")

        phase = "analyze"
        progress.start(phase, total=len(files))
        per_file = await run_in_batches(
            files,
            lambda path: analyze_file(path, config, resolver),
            limit=concurrency,
            on_batch=lambda done, total: progress.advance("analyze", done, total),
        )
        components = [record for records in per_file for record in records]
        progress.complete(phase, detail=f"{len(components)} components")

        phase = "aggregate"
        progress.start(phase)
        summary = aggregate(components)
        progress.complete(phase, detail=f"{summary.adoption_percentage}% adoption")
    except Exception as exc:
        progress.fail(phase, str(exc))
        log.error("scanner.failed", repo=str(root), phase=phase, error=str(exc))
        raise

    log.info(
        "scanner.completed",
        repo=str(root),
        files=len(files),
        components=summary.total_components,
        adoption=summary.adoption_percentage,
    )
    return ScanReport(
        metadata=ReportMetadata(
            timestamp=datetime.now(timezone.utc).isoformat(),
            repo_path=str(repo_path),
            incremental=incremental,
        ),
        summary=summary,
        components=components,
    )
