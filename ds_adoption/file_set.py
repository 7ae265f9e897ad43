"""File-set resolution: full discovery or git-based incremental change sets."""

from __future__ import annotations

import asyncio
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Sequence

import structlog

from ds_adoption.config import ScanConfiguration

log = structlog.get_logger("ds_adoption.file_set")

TARGET_EXTENSION = ".ts"

# Never descended into during a full scan
_SKIP_DIRS = {".git", "node_modules"}


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """Compile a path glob; ``*`` and ``?`` never cross a ``/``.

    ``**/`` matches zero or more whole directories, so ``**/*.spec.ts``
    ignores ``app.spec.ts`` as well as ``src/app.spec.ts``. Any other ``**``
    matches across directories.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        elif pattern[i] == "[" and "]" in pattern[i + 2 :]:
            end = pattern.index("]", i + 2)
            body = pattern[i + 1 : end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            elif body.startswith("^"):
                body = "\\" + body
            out.append("[" + body + "]")
            i = end + 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out))


def is_ignored(rel_path: str, ignore: Sequence[str]) -> bool:
    """Match a root-relative POSIX path against glob patterns, segment-aware.

    ``src/*.ts`` ignores ``src/a.ts`` but not ``src/nested/b.ts``.
    """
    return any(_glob_regex(pattern).fullmatch(rel_path) for pattern in ignore)


def full_scan(root: Path, ignore: Sequence[str]) -> list[Path]:
    """All target files under *root*, minus ignored ones, in sorted order."""
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in _SKIP_DIRS]
        for name in filenames:
            if not name.endswith(TARGET_EXTENSION):
                continue
            path = Path(dirpath) / name
            if not is_ignored(path.relative_to(root).as_posix(), ignore):
                files.append(path)
    return sorted(files)


async def _git_diff_names(root: Path) -> list[str]:
    """Run ``git diff`` against HEAD, raising RuntimeError on failure."""
    proc = await asyncio.create_subprocess_exec(
        "git",
        "-c",
        "core.quotePath=false",
        "diff",
        "--name-only",
        "-z",
        "--relative",
        "--diff-filter=d",
        "HEAD",
        cwd=str(root),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise RuntimeError(
            f"git command failed (exit {proc.returncode}): {stderr.decode().strip()}"
        )
    # -z output is NUL-separated and never quoted
    return [os.fsdecode(name) for name in stdout.split(b"\0") if name]


async def changed_files(root: Path, ignore: Sequence[str]) -> list[Path]:
    """Target files changed relative to HEAD.

    Returns ``[]`` (with a warning) when *root* is not a git checkout or the
    query fails.
    """
    if not (root / ".git").exists():
        log.warning("file_set.no_git_metadata", root=str(root))
        return []
    try:
        names = await _git_diff_names(root)
    except (OSError, RuntimeError) as exc:
        log.warning("file_set.change_detection_failed", root=str(root), error=str(exc))
        return []

    return sorted(
        root / name
        for name in names
        if name.endswith(TARGET_EXTENSION) and not is_ignored(name, ignore)
    )


async def resolve_file_set(
    root: Path,
    config: ScanConfiguration,
    incremental: bool = False,
) -> list[Path]:
    """Choose the files to analyze.

    In incremental mode an empty change set, whether from a clean tree or a
    failed query, falls back to a full scan.
    """
    if incremental:
        files = await changed_files(root, config.ignore)
        if files:
            log.info("file_set.incremental", root=str(root), count=len(files))
            return files
        log.info("file_set.incremental_fallback", root=str(root))
    files = full_scan(root, config.ignore)
    log.info("file_set.full_scan", root=str(root), count=len(files))
    return files
