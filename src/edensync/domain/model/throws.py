"""Throw (planting event) entities."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

CHAIN_LOCAL_ID_PREFIX = "chain-"

type ThrowFingerprint = tuple[str, datetime, str, str, str]


def chain_local_id(ledger_id: int) -> str:
    return f"{CHAIN_LOCAL_ID_PREFIX}{ledger_id}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ThrowDraft:
    """What the user entered for a new throw, before anything is written."""

    pod_type_id: str
    pod_type_name: str
    pod_type_icon: str
    thrown_at: datetime
    location_label: str
    growth_model_id: str
    thrown_by: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Throw:
    """A planting event, either pending locally or confirmed by the ledger.

    ``local_id`` is stable for the entity's lifetime. ``ledger_id`` stays ``0``
    until the ledger assigns an asset id.
    """

    local_id: str
    ledger_id: int = 0
    tx_id: str | None = None
    pod_type_id: str
    pod_type_name: str
    pod_type_icon: str
    thrown_at: datetime
    location_label: str
    growth_model_id: str
    thrown_by: str
    confirmed_at: datetime | None = None
    is_pending: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_draft(
        cls,
        draft: ThrowDraft,
        *,
        local_id: str,
        ledger_id: int = 0,
        tx_id: str | None = None,
    ) -> Throw:
        return cls(
            local_id=local_id,
            ledger_id=ledger_id,
            tx_id=tx_id,
            pod_type_id=draft.pod_type_id,
            pod_type_name=draft.pod_type_name,
            pod_type_icon=draft.pod_type_icon,
            thrown_at=draft.thrown_at,
            location_label=draft.location_label,
            growth_model_id=draft.growth_model_id,
            thrown_by=draft.thrown_by,
        )

    @property
    def has_ledger_id(self) -> bool:
        return self.ledger_id > 0

    @property
    def fingerprint(self) -> ThrowFingerprint:
        """Content identity, independent of local and ledger ids."""
        return (
            self.pod_type_id,
            self.thrown_at,
            self.growth_model_id,
            self.location_label,
            self.thrown_by,
        )

    def as_pending(self, created_at: datetime) -> Throw:
        return replace(self, is_pending=True, created_at=created_at)

    def as_confirmed(self) -> Throw:
        return replace(
            self,
            local_id=chain_local_id(self.ledger_id),
            is_pending=False,
            created_at=None,
        )
