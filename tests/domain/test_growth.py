from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from edensync.domain.growth import GROWTH_MODELS, get_growth_model, resolve_growth_stage
from edensync.domain.model import GrowthModel, GrowthStage

THROWN_AT = datetime(2025, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize(
    ("days", "stage_id"),
    [
        (0, "dormant"),
        (6, "dormant"),
        (7, "germination"),
        (44, "seedling"),
        (75, "flowering"),
        (139, "fruiting"),
        (400, "spread"),
    ],
)
def test_resolve_growth_stage_temperate_herb(days: int, stage_id: str) -> None:
    reading = resolve_growth_stage(
        THROWN_AT,
        "temperate-herb",
        now=THROWN_AT + timedelta(days=days, hours=1),
    )

    assert reading is not None
    assert reading.stage.id == stage_id
    assert reading.days_since == days


def test_progress_is_clamped_to_lifecycle() -> None:
    halfway = resolve_growth_stage(THROWN_AT, "temperate-herb", now=THROWN_AT + timedelta(days=90))
    late = resolve_growth_stage(THROWN_AT, "temperate-herb", now=THROWN_AT + timedelta(days=900))

    assert halfway is not None
    assert halfway.progress_percent == 50
    assert late is not None
    assert late.progress_percent == 100


def test_future_throw_counts_as_day_zero() -> None:
    reading = resolve_growth_stage(THROWN_AT, "fast-green", now=THROWN_AT - timedelta(days=3))

    assert reading is not None
    assert reading.days_since == 0
    assert reading.progress_percent == 0
    assert reading.stage.id == "dormant"


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = datetime(2025, 1, 1)  # noqa: DTZ001

    reading = resolve_growth_stage(naive, "temperate-herb", now=THROWN_AT + timedelta(days=21))

    assert reading is not None
    assert reading.stage.id == "seedling"


def test_unknown_growth_model_yields_none() -> None:
    assert resolve_growth_stage(THROWN_AT, "cactus", now=THROWN_AT) is None
    assert get_growth_model("cactus") is None


def test_growth_table_models_are_well_formed() -> None:
    for model_id, model in GROWTH_MODELS.items():
        assert model.id == model_id
        assert model.stages[0].start_day == 0


def test_growth_model_rejects_unordered_stages() -> None:
    stages = (
        GrowthStage(id="dormant", name="Dormant", icon="", start_day=0),
        GrowthStage(id="late", name="Late", icon="", start_day=30),
        GrowthStage(id="early", name="Early", icon="", start_day=10),
    )

    with pytest.raises(ValueError, match="ordered"):
        GrowthModel(id="broken", name="Broken", stages=stages, lifecycle_days=60)
