"""State owned by one reconciliation engine instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from edensync.domain.model import Harvest, Throw


@dataclass(slots=True)
class ReconciliationState:
    """Everything known about one owner's timeline.

    ``confirmed`` is keyed by ledger id, ``pending`` by local id (newest first) and
    ``harvests`` by harvest id. ``confirmed_count_at_last_submit`` snapshots the size
    of ``confirmed`` when the last pending throw was submitted.
    """

    owner_key: str
    confirmed: list[Throw] = field(default_factory=list["Throw"])
    pending: list[Throw] = field(default_factory=list["Throw"])
    harvests: list[Harvest] = field(default_factory=list["Harvest"])
    confirmed_count_at_last_submit: int = 0

    @property
    def confirmed_ledger_ids(self) -> set[int]:
        return {throw.ledger_id for throw in self.confirmed}


@dataclass(frozen=True, slots=True)
class RefreshResult:
    """Outcome of one refresh against the ledger."""

    confirmed: int
    harvests: int
    pending: int
    retired: int = 0
    expired: int = 0
    harvests_degraded: bool = False
    discarded: bool = False
