"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import (
    CONFIRMED_THROWS,
    HARVESTS,
    PENDING_THROWS,
    CacheCollection,
    ReconciliationCache,
)
from .ledger import (
    HarvestQuery,
    HarvestWrite,
    LedgerWriter,
    ThrowQuery,
    ThrowWrite,
    WriteHandle,
    WritePayload,
)
from .lookup import GrowthStageResolver

__all__ = [
    "CONFIRMED_THROWS",
    "HARVESTS",
    "PENDING_THROWS",
    "CacheCollection",
    "GrowthStageResolver",
    "HarvestQuery",
    "HarvestWrite",
    "LedgerWriter",
    "ReconciliationCache",
    "ThrowQuery",
    "ThrowWrite",
    "WriteHandle",
    "WritePayload",
]
