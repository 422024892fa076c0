"""Read-only projections of the reconciliation state for presentation."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from edensync.domain.clock import utcnow
from edensync.domain.growth import HARVESTABLE_STAGE_IDS, resolve_growth_stage

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from edensync.domain.model import GrowthStage, Throw
    from edensync.domain.ports import GrowthStageResolver

    from .state import ReconciliationState


@dataclass(frozen=True, slots=True)
class StageNotification:
    """Current lifecycle stage of one confirmed throw."""

    local_id: str
    ledger_id: int
    growth_model_id: str
    stage: GrowthStage
    progress_percent: int
    days_since: int

    @property
    def is_harvestable(self) -> bool:
        return self.stage.id in HARVESTABLE_STAGE_IDS


@dataclass(frozen=True, slots=True)
class TimelineSummary:
    total: int
    pending: int
    dominant_stage: GrowthStage | None
    harvestable: int


def unified_timeline(state: ReconciliationState) -> list[Throw]:
    """Pending throws (minus any the ledger already confirmed) then confirmed throws.

    Confirmed throws are ordered by descending event timestamp.
    """

    confirmed_ids = state.confirmed_ledger_ids
    pending = [
        throw
        for throw in state.pending
        if not throw.has_ledger_id or throw.ledger_id not in confirmed_ids
    ]
    confirmed = sorted(state.confirmed, key=lambda throw: throw.thrown_at, reverse=True)
    return [*pending, *confirmed]


def stage_notifications(
    confirmed: Iterable[Throw],
    *,
    resolver: GrowthStageResolver = resolve_growth_stage,
    now: datetime | None = None,
) -> list[StageNotification]:
    """Stage readings for confirmed throws; throws with unknown growth models are skipped."""

    reference = now or utcnow()
    notifications: list[StageNotification] = []
    for throw in confirmed:
        if throw.is_pending:
            continue
        reading = resolver(throw.thrown_at, throw.growth_model_id, now=reference)
        if reading is None:
            continue
        notifications.append(
            StageNotification(
                local_id=throw.local_id,
                ledger_id=throw.ledger_id,
                growth_model_id=throw.growth_model_id,
                stage=reading.stage,
                progress_percent=reading.progress_percent,
                days_since=reading.days_since,
            )
        )
    return notifications


def summarize(
    timeline: Sequence[Throw],
    *,
    resolver: GrowthStageResolver = resolve_growth_stage,
    now: datetime | None = None,
) -> TimelineSummary:
    reference = now or utcnow()
    stages: list[GrowthStage] = []
    for throw in timeline:
        reading = resolver(throw.thrown_at, throw.growth_model_id, now=reference)
        if reading is not None:
            stages.append(reading.stage)

    dominant: GrowthStage | None = None
    if stages:
        counts = Counter(stage.id for stage in stages)
        dominant_id, _count = counts.most_common(1)[0]
        dominant = next(stage for stage in stages if stage.id == dominant_id)

    return TimelineSummary(
        total=len(timeline),
        pending=sum(1 for throw in timeline if throw.is_pending),
        dominant_stage=dominant,
        harvestable=sum(1 for stage in stages if stage.id in HARVESTABLE_STAGE_IDS),
    )


__all__ = [
    "StageNotification",
    "TimelineSummary",
    "stage_notifications",
    "summarize",
    "unified_timeline",
]
