"""ds-adoption: measure design-system adoption in Angular codebases."""

__version__ = "1.0.2"

from ds_adoption.config import DEFAULT_CONFIG, ScanConfiguration, load_config
from ds_adoption.models import (
    Classification,
    ComponentRecord,
    ReportSummary,
    ScanReport,
    UsageShape,
)
from ds_adoption.scanner import scan_repository
from ds_adoption.scoring import Weights, aggregate

__all__ = [
    "Classification",
    "ComponentRecord",
    "DEFAULT_CONFIG",
    "ReportSummary",
    "ScanConfiguration",
    "ScanReport",
    "UsageShape",
    "Weights",
    "aggregate",
    "load_config",
    "scan_repository",
]
