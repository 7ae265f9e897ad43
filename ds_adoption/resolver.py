"""Import specifier resolution: relative paths and tsconfig ``baseUrl``/``paths`` aliases."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path

import structlog

log = structlog.get_logger("ds_adoption.resolver")

TSCONFIG_FILENAME = "tsconfig.json"

# Probe order when turning a module path into a file
_CANDIDATE_SUFFIXES = (".ts", ".tsx", ".d.ts", "/index.ts", "/index.d.ts", "")

# Comments or trailing commas, skipping over string literals (group 1)
_JSONC_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_JSONC_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,(?=\s*[}\]])')

_MAX_EXTENDS_DEPTH = 10


@dataclass(frozen=True)
class ModuleResolutionConfig:
    """Resolution options derived from tsconfig.json (read-only)."""

    config_dir: Path | None = None
    base_url: Path | None = None
    paths: tuple[tuple[str, tuple[str, ...]], ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.base_url is None and not self.paths


EMPTY_RESOLUTION = ModuleResolutionConfig()


def _strip_jsonc(text: str) -> str:
    def keep_strings(m: re.Match[str]) -> str:
        return m.group(1) or ""

    text = _JSONC_COMMENT_RE.sub(keep_strings, text)
    return _JSONC_TRAILING_COMMA_RE.sub(keep_strings, text)


def _read_tsconfig(path: Path, depth: int = 0) -> dict:
    """Read a tsconfig file, merging ``compilerOptions`` from relative ``extends``.

    Paths in ``baseUrl`` are made absolute against the file that declares them,
    matching how tsc treats inherited options.
    """
    data = json.loads(_strip_jsonc(path.read_text(encoding="utf-8")))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level value is not an object")

    options: dict = {}
    parents = data.get("extends")
    if isinstance(parents, str):
        parents = [parents]
    if not isinstance(parents, list) or depth >= _MAX_EXTENDS_DEPTH:
        parents = []
    # later parents override earlier ones, the file itself overrides all
    for parent in parents:
        if not (isinstance(parent, str) and parent.startswith(".")):
            continue
        parent_path = (path.parent / parent).resolve()
        if parent_path.suffix != ".json":
            parent_path = parent_path.with_name(parent_path.name + ".json")
        try:
            inherited = _read_tsconfig(parent_path, depth + 1)["compilerOptions"]
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            log.warning(
                "resolver.tsconfig_extends_unreadable",
                path=str(path),
                parent=str(parent_path),
                error=str(exc),
            )
            continue
        if "paths" not in inherited:
            inherited.pop("_pathsBase", None)
        options.update(inherited)

    own = data.get("compilerOptions")
    if not isinstance(own, dict):
        own = {}
    if isinstance(own.get("baseUrl"), str):
        own = {**own, "baseUrl": str((path.parent / own["baseUrl"]).resolve())}
    options.update(own)
    # paths without baseUrl resolve relative to the declaring tsconfig
    options.setdefault("_pathsBase", str(path.parent.resolve()))
    if "paths" in own:
        options["_pathsBase"] = str(path.parent.resolve())
    return {"compilerOptions": options}


def load_module_resolution(repo_root: Path) -> ModuleResolutionConfig:
    """Build resolution options from ``<repo_root>/tsconfig.json``.

    Missing or unreadable settings are logged and produce empty options.
    """
    tsconfig = repo_root / TSCONFIG_FILENAME
    if not tsconfig.is_file():
        log.warning("resolver.tsconfig_missing", path=str(tsconfig))
        return EMPTY_RESOLUTION
    try:
        options = _read_tsconfig(tsconfig)["compilerOptions"]
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        log.warning("resolver.tsconfig_unreadable", path=str(tsconfig), error=str(exc))
        return EMPTY_RESOLUTION

    base_url = Path(options["baseUrl"]) if isinstance(options.get("baseUrl"), str) else None
    raw_paths = options.get("paths") if isinstance(options.get("paths"), dict) else {}
    paths = tuple(
        (pattern, tuple(t for t in targets if isinstance(t, str)))
        for pattern, targets in raw_paths.items()
        if isinstance(targets, list)
    )
    return ModuleResolutionConfig(
        config_dir=Path(options["_pathsBase"]),
        base_url=base_url,
        paths=paths,
    )


def _match_pattern(pattern: str, specifier: str) -> str | None:
    """Return the ``*`` capture if *specifier* matches *pattern*, else None."""
    if "*" not in pattern:
        return "" if pattern == specifier else None
    prefix, _, suffix = pattern.partition("*")
    if (
        specifier.startswith(prefix)
        and specifier.endswith(suffix)
        and len(specifier) >= len(prefix) + len(suffix)
    ):
        return specifier[len(prefix) : len(specifier) - len(suffix)]
    return None


class ImportResolver:
    """Map an import specifier to a canonical module identity."""

    def __init__(self, options: ModuleResolutionConfig = EMPTY_RESOLUTION) -> None:
        self.options = options

    def resolve(self, specifier: str, importing_file: str | Path) -> str:
        if specifier.startswith("."):
            return os.path.normpath(
                os.path.join(os.path.dirname(os.path.abspath(importing_file)), specifier)
            )
        try:
            resolved = self._resolve_module(specifier)
        except (OSError, ValueError):
            log.debug("resolver.lookup_failed", specifier=specifier, exc_info=True)
            return specifier
        return resolved if resolved is not None else specifier

    def _resolve_module(self, specifier: str) -> str | None:
        if self.options.is_empty:
            return None

        for target in self._alias_targets(specifier):
            found = self._probe(target)
            if found is not None:
                return found

        if self.options.base_url is not None:
            return self._probe(self.options.base_url / specifier)
        return None

    def _alias_targets(self, specifier: str) -> list[Path]:
        """Targets from the best-matching ``paths`` pattern (longest prefix wins)."""
        best: tuple[int, str, tuple[str, ...]] | None = None
        for pattern, targets in self.options.paths:
            capture = _match_pattern(pattern, specifier)
            if capture is None:
                continue
            rank = len(pattern.partition("*")[0]) if "*" in pattern else len(pattern) + 1
            if best is None or rank > best[0]:
                best = (rank, capture, targets)
        if best is None:
            return []

        _, capture, targets = best
        root = self.options.base_url or self.options.config_dir or Path.cwd()
        return [root / t.replace("*", capture) for t in targets]

    @staticmethod
    def _probe(module_path: Path) -> str | None:
        base = str(module_path)
        for suffix in _CANDIDATE_SUFFIXES:
            candidate = Path(base + suffix)
            if candidate.is_file():
                return str(candidate.resolve())
        return None
