"""Port for the durable per-owner cache of reconciliation collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from edensync.domain.model import Harvest, Throw

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class CacheCollection[T]:
    """Typed name of one cached collection; ``T`` is the item type it holds."""

    name: str


CONFIRMED_THROWS: Final = CacheCollection[Throw]("confirmed")
PENDING_THROWS: Final = CacheCollection[Throw]("pending")
HARVESTS: Final = CacheCollection[Harvest]("harvests")


@runtime_checkable
class ReconciliationCache(Protocol):
    """Best-effort storage; the ledger stays authoritative.

    ``load`` never raises (unreadable data yields ``[]``) and ``save`` replaces the
    whole collection, swallowing write failures.
    """

    def load[T](self, owner_key: str, collection: CacheCollection[T]) -> list[T]: ...

    def save[T](
        self,
        owner_key: str,
        collection: CacheCollection[T],
        items: Sequence[T],
    ) -> None: ...


__all__ = [
    "CONFIRMED_THROWS",
    "HARVESTS",
    "PENDING_THROWS",
    "CacheCollection",
    "ReconciliationCache",
]
