"""Pydantic models for cached records.

Records are stored as JSON so that an older or newer client can at worst skip the
items it does not understand.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from edensync.domain.clock import ensure_aware
from edensync.domain.model import (
    Harvest,
    QuantityClass,
    Throw,
    harvest_id_from_str,
    harvest_id_to_str,
)


class StoredModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class CachePayload(StoredModel):
    items: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])


class StoredThrow(StoredModel):
    local_id: str
    ledger_id: int = 0
    tx_id: str | None = None
    pod_type_id: str
    pod_type_name: str = ""
    pod_type_icon: str = ""
    thrown_at: datetime
    location_label: str = ""
    growth_model_id: str
    thrown_by: str = ""
    confirmed_at: datetime | None = None
    is_pending: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, throw: Throw) -> StoredThrow:
        return cls(
            local_id=throw.local_id,
            ledger_id=throw.ledger_id,
            tx_id=throw.tx_id,
            pod_type_id=throw.pod_type_id,
            pod_type_name=throw.pod_type_name,
            pod_type_icon=throw.pod_type_icon,
            thrown_at=throw.thrown_at,
            location_label=throw.location_label,
            growth_model_id=throw.growth_model_id,
            thrown_by=throw.thrown_by,
            confirmed_at=throw.confirmed_at,
            is_pending=throw.is_pending,
            created_at=throw.created_at,
        )

    def to_domain(self) -> Throw:
        return Throw(
            local_id=self.local_id,
            ledger_id=self.ledger_id,
            tx_id=self.tx_id,
            pod_type_id=self.pod_type_id,
            pod_type_name=self.pod_type_name,
            pod_type_icon=self.pod_type_icon,
            thrown_at=ensure_aware(self.thrown_at),
            location_label=self.location_label,
            growth_model_id=self.growth_model_id,
            thrown_by=self.thrown_by,
            confirmed_at=ensure_aware(self.confirmed_at) if self.confirmed_at else None,
            is_pending=self.is_pending,
            created_at=ensure_aware(self.created_at) if self.created_at else None,
        )


class StoredHarvest(StoredModel):
    id: str
    throw_ledger_id: int
    plant_id: str
    quantity: QuantityClass = QuantityClass.SMALL
    harvested_at: datetime
    notes: str = ""
    confirmed_at: datetime | None = None

    @classmethod
    def from_domain(cls, harvest: Harvest) -> StoredHarvest:
        return cls(
            id=harvest_id_to_str(harvest.id),
            throw_ledger_id=harvest.throw_ledger_id,
            plant_id=harvest.plant_id,
            quantity=harvest.quantity,
            harvested_at=harvest.harvested_at,
            notes=harvest.notes,
            confirmed_at=harvest.confirmed_at,
        )

    def to_domain(self) -> Harvest:
        return Harvest(
            id=harvest_id_from_str(self.id),
            throw_ledger_id=self.throw_ledger_id,
            plant_id=self.plant_id,
            quantity=self.quantity,
            harvested_at=ensure_aware(self.harvested_at),
            notes=self.notes,
            confirmed_at=ensure_aware(self.confirmed_at) if self.confirmed_at else None,
        )


def load_confirmed_throw(raw: dict[str, object]) -> Throw:
    return StoredThrow.model_validate(raw).to_domain().as_confirmed()


def load_pending_throw(raw: dict[str, object]) -> Throw:
    return replace(StoredThrow.model_validate(raw).to_domain(), is_pending=True)


def load_harvest(raw: dict[str, object]) -> Harvest:
    return StoredHarvest.model_validate(raw).to_domain()


def dump_throw(throw: Throw) -> dict[str, object]:
    return StoredThrow.from_domain(throw).model_dump(mode="json")


def dump_harvest(harvest: Harvest) -> dict[str, object]:
    return StoredHarvest.from_domain(harvest).model_dump(mode="json")
