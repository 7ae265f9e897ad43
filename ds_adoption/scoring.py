"""ScoreAggregator: fold component records into a weighted adoption summary."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ds_adoption.models import Classification, ComponentRecord, ReportSummary

# Reported when no components were found (the ratio is undefined)
EMPTY_ADOPTION_PERCENTAGE = 0.0


@dataclass(frozen=True)
class Weights:
    """Per-category weights; all must lie in [0, 1] so weighted <= max."""

    design_system: float = 1.0
    custom: float = 0.75
    dynamic_import: float = 0.5

    def __post_init__(self) -> None:
        for name in ("design_system", "custom", "dynamic_import"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"weight {name}={value} outside [0, 1]")

    @property
    def composition(self) -> float:
        """Custom component built alongside design-system imports."""
        return (self.custom + self.design_system) / 2


DEFAULT_WEIGHTS = Weights()


def _round2(value: float) -> float:
    """Two decimals, halves rounded up (3.625 -> 3.63)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def component_weight(record: ComponentRecord, weights: Weights = DEFAULT_WEIGHTS) -> float:
    if record.classification is Classification.DESIGN_SYSTEM_IMPORT:
        return weights.design_system
    if record.classification is Classification.DYNAMIC_IMPORT_REFERENCE:
        return weights.dynamic_import
    if record.composition_flag:
        return weights.composition
    return weights.custom


def aggregate(
    records: Iterable[ComponentRecord],
    weights: Weights = DEFAULT_WEIGHTS,
) -> ReportSummary:
    """Pure fold over *records*; the same input always yields the same summary."""
    records = list(records)
    total = len(records)
    design_system = sum(1 for r in records if r.is_design_system)
    weighted = sum(component_weight(r, weights) for r in records)
    max_score = total * 1.0

    if total == 0:
        percentage = EMPTY_ADOPTION_PERCENTAGE
    else:
        percentage = _round2(weighted / max_score * 100)

    return ReportSummary(
        design_system_components=design_system,
        custom_components=total - design_system,
        total_components=total,
        adoption_percentage=percentage,
        weighted_score=_round2(weighted),
        max_score=_round2(max_score),
    )
