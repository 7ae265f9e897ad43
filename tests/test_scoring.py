"""Tests for weighted score aggregation."""

from __future__ import annotations

import pytest

from ds_adoption.models import Classification, ComponentRecord, UsageShape
from ds_adoption.scoring import (
    DEFAULT_WEIGHTS,
    EMPTY_ADOPTION_PERCENTAGE,
    Weights,
    aggregate,
    component_weight,
)


def _ds(name: str = "Button") -> ComponentRecord:
    return ComponentRecord(
        name=name,
        classification=Classification.DESIGN_SYSTEM_IMPORT,
        origin="@ui-kit/button",
        file_path="/repo/a.ts",
        usage_shape=UsageShape(),
    )


def _custom(composition: bool = False) -> ComponentRecord:
    return ComponentRecord(
        name="AppComponent",
        classification=Classification.CUSTOM_COMPONENT,
        origin="custom",
        file_path="/repo/a.ts",
        composition_flag=composition,
        usage_shape=UsageShape(external=1),
    )


def _lazy() -> ComponentRecord:
    return ComponentRecord(
        name="lazy-loaded",
        classification=Classification.DYNAMIC_IMPORT_REFERENCE,
        origin="./lazy/module",
        file_path="/repo/routes.ts",
    )


class TestComponentWeight:
    def test_weights(self):
        assert component_weight(_ds()) == 1.0
        assert component_weight(_lazy()) == 0.5
        assert component_weight(_custom(composition=True)) == 0.875
        assert component_weight(_custom()) == 0.75

    def test_composition_is_midpoint(self):
        w = Weights(design_system=1.0, custom=0.5)
        assert w.composition == 0.75

    def test_weights_outside_unit_interval_rejected(self):
        with pytest.raises(ValueError):
            Weights(custom=1.5)
        with pytest.raises(ValueError):
            Weights(dynamic_import=-0.1)


class TestAggregate:
    def test_empty(self):
        summary = aggregate([])
        assert summary.total_components == 0
        assert summary.max_score == 0
        assert summary.weighted_score == 0
        assert summary.adoption_percentage == EMPTY_ADOPTION_PERCENTAGE == 0.0

    def test_single_design_system_import(self):
        summary = aggregate([_ds()])
        assert summary.design_system_components == 1
        assert summary.custom_components == 0
        assert summary.adoption_percentage == 100.0

    def test_mixed(self):
        summary = aggregate([_ds(), _custom(), _lazy(), _custom(composition=True)])
        assert summary.total_components == 4
        assert summary.design_system_components == 1
        assert summary.custom_components == 3
        assert summary.weighted_score == 3.13  # 3.125, half rounded up
        assert summary.max_score == 4.0
        assert summary.adoption_percentage == 78.13

    def test_halves_round_up(self):
        # 6.25 / 8 = 78.125%; banker's rounding would give 78.12
        summary = aggregate([_ds()] + [_custom() for _ in range(7)])
        assert summary.adoption_percentage == 78.13

    def test_halves_round_up_for_weighted_score(self):
        summary = aggregate([_ds(), _custom(composition=True), _custom(), _ds("Card")])
        assert summary.weighted_score == 3.63  # 3.625
        assert summary.adoption_percentage == 90.63  # 90.625

    def test_weighted_never_exceeds_max(self):
        records = [_ds(), _ds("Card"), _custom(), _lazy()]
        summary = aggregate(records)
        assert summary.weighted_score <= summary.max_score

    def test_idempotent(self):
        records = [_ds(), _custom(), _lazy()]
        assert aggregate(records) == aggregate(records)

    def test_accepts_iterator(self):
        summary = aggregate(iter([_ds(), _custom()]))
        assert summary.total_components == 2
        assert summary.adoption_percentage == 87.5

    def test_custom_weights(self):
        summary = aggregate([_custom()], Weights(custom=0.5))
        assert summary.adoption_percentage == 50.0

    def test_default_weights(self):
        assert DEFAULT_WEIGHTS == Weights(1.0, 0.75, 0.5)
