"""Data models for the adoption scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CUSTOM_ORIGIN = "custom"
LAZY_LOADED_NAME = "lazy-loaded"


class Classification(Enum):
    """Mutually exclusive record categories."""

    DESIGN_SYSTEM_IMPORT = "design-system-import"
    CUSTOM_COMPONENT = "custom-component"
    DYNAMIC_IMPORT_REFERENCE = "dynamic-import-reference"


@dataclass(frozen=True)
class UsageShape:
    """Whether a component's template is inline (``template``) or external (``templateUrl``)."""

    inline: int = 0
    external: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"inline": self.inline, "external": self.external}


@dataclass(frozen=True)
class ComponentRecord:
    """A single classified UI declaration or reference found in one file."""

    name: str
    classification: Classification
    origin: str
    file_path: str
    composition_flag: bool = False
    usage_shape: UsageShape | None = None
    selector: str | None = None

    @property
    def is_design_system(self) -> bool:
        return self.classification is Classification.DESIGN_SYSTEM_IMPORT

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "classification": self.classification.value,
            "origin": self.origin,
            "filePath": self.file_path,
            "compositionFlag": self.composition_flag,
            "usageShape": self.usage_shape.to_dict() if self.usage_shape else None,
            "selector": self.selector,
        }


@dataclass(frozen=True)
class ReportSummary:
    """Aggregated counts and weighted adoption score."""

    design_system_components: int
    custom_components: int
    total_components: int
    adoption_percentage: float
    weighted_score: float
    max_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "designSystemComponents": self.design_system_components,
            "customComponents": self.custom_components,
            "totalComponents": self.total_components,
            "adoptionPercentage": self.adoption_percentage,
            "weightedScore": self.weighted_score,
            "maxScore": self.max_score,
        }


@dataclass(frozen=True)
class ReportMetadata:
    timestamp: str
    repo_path: str
    incremental: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "repoPath": self.repo_path,
            "incremental": self.incremental,
        }


@dataclass
class ScanReport:
    """Result of a full scan pipeline run."""

    metadata: ReportMetadata
    summary: ReportSummary
    components: list[ComponentRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "summary": self.summary.to_dict(),
            "components": [c.to_dict() for c in self.components],
        }
