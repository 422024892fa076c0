"""Harvest entities and their provisional/durable identities.

A harvest is shown to the user the moment it is submitted, long before the ledger
has assigned it a transaction id. Until then it is keyed by a ``PlaceholderId``;
once the write is confirmed the same record is renamed to a ``LedgerTxId``.
Keeping the two as distinct types makes "is this confirmed?" a type question
instead of a string-prefix convention. The ``pending-`` prefix only exists where
ids are serialised (cache records).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import QuantityClass

PLACEHOLDER_PREFIX = "pending-"


@dataclass(frozen=True, slots=True)
class PlaceholderId:
    token: str

    @classmethod
    def new(cls) -> PlaceholderId:
        return cls(uuid4().hex)

    def __str__(self) -> str:
        return f"{PLACEHOLDER_PREFIX}{self.token}"


@dataclass(frozen=True, slots=True)
class LedgerTxId:
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Ledger transaction id must not be empty")
        if self.value.startswith(PLACEHOLDER_PREFIX):
            raise ValueError(f"Ledger transaction id uses reserved prefix: {self.value}")

    def __str__(self) -> str:
        return self.value


type HarvestId = PlaceholderId | LedgerTxId

type HarvestFingerprint = tuple[int, str, QuantityClass, datetime, str]


def harvest_id_to_str(harvest_id: HarvestId) -> str:
    return str(harvest_id)


def harvest_id_from_str(value: str) -> HarvestId:
    if value.startswith(PLACEHOLDER_PREFIX):
        return PlaceholderId(value.removeprefix(PLACEHOLDER_PREFIX))
    return LedgerTxId(value)


@dataclass(frozen=True, slots=True, kw_only=True)
class HarvestDraft:
    throw_ledger_id: int
    plant_id: str
    quantity: QuantityClass
    harvested_at: datetime
    notes: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class Harvest:
    id: HarvestId
    throw_ledger_id: int
    plant_id: str
    quantity: QuantityClass
    harvested_at: datetime
    notes: str = ""
    confirmed_at: datetime | None = None

    @classmethod
    def from_draft(cls, draft: HarvestDraft, *, harvest_id: HarvestId) -> Harvest:
        return cls(
            id=harvest_id,
            throw_ledger_id=draft.throw_ledger_id,
            plant_id=draft.plant_id,
            quantity=draft.quantity,
            harvested_at=draft.harvested_at,
            notes=draft.notes,
        )

    @property
    def is_placeholder(self) -> bool:
        return isinstance(self.id, PlaceholderId)

    @property
    def fingerprint(self) -> HarvestFingerprint:
        return (
            self.throw_ledger_id,
            self.plant_id,
            self.quantity,
            self.harvested_at,
            self.notes,
        )

    def renamed(self, new_id: HarvestId) -> Harvest:
        """Return the same harvest under a new identity; no other field changes."""
        return replace(self, id=new_id)
