"""Static growth-model table and the default stage resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from edensync.domain.clock import ensure_aware, utcnow
from edensync.domain.model import GrowthModel, GrowthStage, StageReading

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_GROWTH_MODEL_ID: Final[str] = "temperate-herb"
HARVESTABLE_STAGE_IDS: Final[frozenset[str]] = frozenset({"fruiting", "spread"})

_SECONDS_PER_DAY = 86_400


def _stages(*rows: tuple[str, str, str, int]) -> tuple[GrowthStage, ...]:
    return tuple(GrowthStage(id=i, name=n, icon=c, start_day=d) for i, n, c, d in rows)


GROWTH_MODELS: Final[dict[str, GrowthModel]] = {
    model.id: model
    for model in (
        GrowthModel(
            id="temperate-herb",
            name="Temperate herb",
            stages=_stages(
                ("dormant", "Dormant", "🌰", 0),
                ("germination", "Germination", "🌱", 7),
                ("seedling", "Seedling", "🌿", 21),
                ("vegetative", "Vegetative", "🪴", 45),
                ("flowering", "Flowering", "🌼", 75),
                ("fruiting", "Fruiting", "🍅", 100),
                ("spread", "Spread", "🌾", 140),
            ),
            lifecycle_days=180,
        ),
        GrowthModel(
            id="fast-green",
            name="Fast leafy green",
            stages=_stages(
                ("dormant", "Dormant", "🌰", 0),
                ("germination", "Germination", "🌱", 4),
                ("seedling", "Seedling", "🌿", 12),
                ("vegetative", "Vegetative", "🥬", 25),
                ("fruiting", "Harvestable", "🥗", 40),
                ("spread", "Self-seeding", "🌾", 60),
            ),
            lifecycle_days=75,
        ),
        GrowthModel(
            id="perennial-shrub",
            name="Perennial fruit shrub",
            stages=_stages(
                ("dormant", "Dormant", "🌰", 0),
                ("germination", "Germination", "🌱", 14),
                ("seedling", "Seedling", "🌿", 45),
                ("vegetative", "Establishing", "🌳", 120),
                ("flowering", "Flowering", "🌸", 300),
                ("fruiting", "Fruiting", "🫐", 365),
                ("spread", "Spread", "🌾", 540),
            ),
            lifecycle_days=730,
        ),
    )
}


def get_growth_model(growth_model_id: str) -> GrowthModel | None:
    return GROWTH_MODELS.get(growth_model_id)


def resolve_growth_stage(
    thrown_at: datetime,
    growth_model_id: str,
    *,
    now: datetime | None = None,
) -> StageReading | None:
    """Locate a throw within its growth model, or ``None`` for unknown models.

    Throws dated in the future count as day 0. Progress is the elapsed share of the
    model's whole lifecycle, clamped to 0..100.
    """

    model = get_growth_model(growth_model_id)
    if model is None:
        return None

    reference = ensure_aware(now) if now is not None else utcnow()
    elapsed = (reference - ensure_aware(thrown_at)).total_seconds()
    days_since = max(0, int(elapsed // _SECONDS_PER_DAY))

    stage = model.stages[0]
    for candidate in model.stages:
        if candidate.start_day > days_since:
            break
        stage = candidate

    progress = min(100, round(days_since * 100 / model.lifecycle_days))
    return StageReading(stage=stage, progress_percent=progress, days_since=days_since)


__all__ = [
    "DEFAULT_GROWTH_MODEL_ID",
    "GROWTH_MODELS",
    "HARVESTABLE_STAGE_IDS",
    "get_growth_model",
    "resolve_growth_stage",
]
