"""Growth-model value types used for lifecycle stage lookups."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GrowthStage:
    id: str
    name: str
    icon: str
    start_day: int


@dataclass(frozen=True, slots=True)
class GrowthModel:
    id: str
    name: str
    stages: tuple[GrowthStage, ...]
    lifecycle_days: int

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError(f"Growth model {self.id} has no stages")
        if self.lifecycle_days <= 0:
            raise ValueError(f"Growth model {self.id} must have a positive lifecycle")
        starts = [stage.start_day for stage in self.stages]
        if starts != sorted(starts) or starts[0] != 0:
            raise ValueError(f"Growth model {self.id} stages must start at day 0 and be ordered")


@dataclass(frozen=True, slots=True)
class StageReading:
    """Where a throw currently is within its growth model."""

    stage: GrowthStage
    progress_percent: int
    days_since: int
