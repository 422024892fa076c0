"""Ports for reading from and writing to the external ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from edensync.domain.model import Harvest, HarvestDraft, Throw, ThrowDraft


@runtime_checkable
class ThrowQuery(Protocol):
    """Return every ledger-confirmed throw created by ``owner_key``.

    Raises ``LedgerQueryError`` when the ledger cannot be read.
    """

    async def __call__(self, owner_key: str) -> list[Throw]: ...


@runtime_checkable
class HarvestQuery(Protocol):
    """Return every ledger-confirmed harvest submitted by ``owner_key``."""

    async def __call__(self, owner_key: str) -> list[Harvest]: ...


@dataclass(frozen=True, slots=True)
class ThrowWrite:
    owner_key: str
    draft: ThrowDraft


@dataclass(frozen=True, slots=True)
class HarvestWrite:
    owner_key: str
    draft: HarvestDraft


type WritePayload = ThrowWrite | HarvestWrite


@dataclass(frozen=True, slots=True)
class WriteHandle:
    """Receipt of a dispatched write.

    ``asset_id`` is only known when the writer waited for the ledger to assign one.
    """

    tx_ids: tuple[str, ...]
    asset_id: int | None = None

    @property
    def primary_tx_id(self) -> str | None:
        return self.tx_ids[0] if self.tx_ids else None


@runtime_checkable
class LedgerWriter(Protocol):
    """Signs and dispatches a write. Signing and wallet sessions live behind this port."""

    async def submit(self, payload: WritePayload) -> WriteHandle: ...


__all__ = [
    "HarvestQuery",
    "HarvestWrite",
    "LedgerWriter",
    "ThrowQuery",
    "ThrowWrite",
    "WriteHandle",
    "WritePayload",
]
