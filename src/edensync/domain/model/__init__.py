"""Domain model for throws, harvests and growth lookups."""

from __future__ import annotations

from .enums import QuantityClass
from .growth import GrowthModel, GrowthStage, StageReading
from .harvests import (
    PLACEHOLDER_PREFIX,
    Harvest,
    HarvestDraft,
    HarvestFingerprint,
    HarvestId,
    LedgerTxId,
    PlaceholderId,
    harvest_id_from_str,
    harvest_id_to_str,
)
from .throws import Throw, ThrowDraft, ThrowFingerprint, chain_local_id

__all__ = [
    "PLACEHOLDER_PREFIX",
    "GrowthModel",
    "GrowthStage",
    "Harvest",
    "HarvestDraft",
    "HarvestFingerprint",
    "HarvestId",
    "LedgerTxId",
    "PlaceholderId",
    "QuantityClass",
    "StageReading",
    "Throw",
    "ThrowDraft",
    "ThrowFingerprint",
    "chain_local_id",
    "harvest_id_from_str",
    "harvest_id_to_str",
]
