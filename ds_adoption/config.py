"""Scan configuration: validated, immutable, threaded explicitly through the pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ds_adoption.exceptions import ConfigError

log = structlog.get_logger("ds_adoption.config")

DEFAULT_DESIGN_SYSTEM_PACKAGES = ("@ui-kit", "@ds")
DEFAULT_IGNORE_PATTERNS = ("**/*.spec.ts", "**/*.stories.ts")


class ScanConfiguration(BaseModel):
    """Design-system package prefixes and ignore globs.

    Both keys are required when loading from a file; ``DEFAULT_CONFIG`` is
    used whenever a file is missing or fails validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    design_system_packages: tuple[str, ...] = Field(alias="designSystemPackages")
    ignore: tuple[str, ...]

    @field_validator("design_system_packages", "ignore", mode="after")
    @classmethod
    def _ordered_unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(not item.strip() for item in v):
            raise ValueError("entries must be non-empty strings")
        return tuple(dict.fromkeys(v))

    def is_design_system(self, module_identity: str) -> bool:
        return any(module_identity.startswith(pkg) for pkg in self.design_system_packages)


DEFAULT_CONFIG = ScanConfiguration(
    design_system_packages=DEFAULT_DESIGN_SYSTEM_PACKAGES,
    ignore=DEFAULT_IGNORE_PATTERNS,
)


def read_config(config_path: Path) -> ScanConfiguration:
    """Read and validate a JSON configuration file.

    Raises ``ConfigError`` on any read, decode or validation failure.
    """
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {config_path}: {exc}") from exc

    try:
        return ScanConfiguration.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


def load_config(config_path: Path | None) -> ScanConfiguration:
    """Load configuration, falling back to ``DEFAULT_CONFIG`` on any failure."""
    if config_path is None:
        return DEFAULT_CONFIG
    try:
        return read_config(config_path)
    except ConfigError as exc:
        log.warning("config.fallback_to_defaults", path=str(config_path), error=str(exc))
        return DEFAULT_CONFIG
