"""Port for static growth-stage lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from edensync.domain.model import StageReading


class GrowthStageResolver(Protocol):
    def __call__(
        self,
        thrown_at: datetime,
        growth_model_id: str,
        *,
        now: datetime | None = None,
    ) -> StageReading | None: ...


__all__ = ["GrowthStageResolver"]
