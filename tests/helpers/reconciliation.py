"""Reusable fakes and builders for reconciliation tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, cast

from edensync.domain.errors import LedgerQueryError
from edensync.domain.model import (
    Harvest,
    HarvestId,
    LedgerTxId,
    QuantityClass,
    Throw,
    chain_local_id,
)
from edensync.domain.ports import WriteHandle

if TYPE_CHECKING:
    from edensync.domain.ports import CacheCollection, WritePayload

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
OWNER = "OWNER-A"
OTHER_OWNER = "OWNER-B"


def make_throw(
    ledger_id: int = 0,
    *,
    local_id: str | None = None,
    pod_type_id: str = "basil",
    thrown_at: datetime | None = None,
    location_label: str = "Back garden",
    growth_model_id: str = "temperate-herb",
    thrown_by: str = OWNER,
    is_pending: bool = False,
    created_at: datetime | None = None,
) -> Throw:
    return Throw(
        local_id=local_id or (chain_local_id(ledger_id) if ledger_id else f"local-{pod_type_id}"),
        ledger_id=ledger_id,
        pod_type_id=pod_type_id,
        pod_type_name=pod_type_id.title(),
        pod_type_icon="🌱",
        thrown_at=thrown_at or BASE_TIME,
        location_label=location_label,
        growth_model_id=growth_model_id,
        thrown_by=thrown_by,
        is_pending=is_pending,
        created_at=created_at,
    )


def make_harvest(
    harvest_id: HarvestId | str,
    *,
    throw_ledger_id: int = 1,
    plant_id: str = "plant-1",
    quantity: QuantityClass = QuantityClass.SMALL,
    harvested_at: datetime | None = None,
    notes: str = "",
) -> Harvest:
    resolved_id = LedgerTxId(harvest_id) if isinstance(harvest_id, str) else harvest_id
    return Harvest(
        id=resolved_id,
        throw_ledger_id=throw_ledger_id,
        plant_id=plant_id,
        quantity=quantity,
        harvested_at=harvested_at or BASE_TIME,
        notes=notes,
    )


@dataclass(slots=True)
class FrozenClock:
    now: datetime = BASE_TIME

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@dataclass(slots=True)
class FakeThrowQuery:
    """Returns the configured throws per owner; ``failures`` raise before results."""

    results: dict[str, list[Throw]] = field(default_factory=dict[str, list[Throw]])
    failures: int = 0
    calls: list[str] = field(default_factory=list[str])

    async def __call__(self, owner_key: str) -> list[Throw]:
        self.calls.append(owner_key)
        if self.failures > 0:
            self.failures -= 1
            raise LedgerQueryError("indexer unavailable")
        return list(self.results.get(owner_key, []))


@dataclass(slots=True)
class FakeHarvestQuery:
    results: dict[str, list[Harvest]] = field(default_factory=dict[str, list[Harvest]])
    fail: bool = False
    calls: list[str] = field(default_factory=list[str])

    async def __call__(self, owner_key: str) -> list[Harvest]:
        self.calls.append(owner_key)
        if self.fail:
            raise LedgerQueryError("harvest lookup failed")
        return list(self.results.get(owner_key, []))


@dataclass(slots=True)
class InMemoryCache:
    """Dictionary-backed cache mirroring the persistence rules of the real adapter."""

    records: dict[tuple[str, str], list[Any]] = field(
        default_factory=dict[tuple[str, str], list[Any]]
    )
    saves: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])

    def load[T](self, owner_key: str, collection: CacheCollection[T]) -> list[T]:
        return list(cast(list[T], self.records.get((owner_key, collection.name), [])))

    def save[T](self, owner_key: str, collection: CacheCollection[T], items: Sequence[T]) -> None:
        self.saves.append((owner_key, collection.name))
        if not items and collection.name == "pending":
            self.records.pop((owner_key, collection.name), None)
            return
        self.records[(owner_key, collection.name)] = list(items)


@dataclass(slots=True)
class FakeWriter:
    """Records payloads; raises ``error`` when set, otherwise returns ``handle``."""

    handle: WriteHandle = field(default_factory=lambda: WriteHandle(tx_ids=("TX-1",)))
    error: Exception | None = None
    payloads: list[WritePayload] = field(default_factory=list["WritePayload"])

    async def submit(self, payload: WritePayload) -> WriteHandle:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.handle
