"""Translate indexer transactions into domain entities."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from edensync.domain.clock import ensure_aware
from edensync.domain.model import Harvest, LedgerTxId, Throw, chain_local_id

from .notes import parse_note
from .schema import HarvestProperties, ThrowProperties

if TYPE_CHECKING:
    from .schema import TransactionPayload

log = getLogger(__name__)


def _round_time(tx: TransactionPayload) -> datetime:
    return datetime.fromtimestamp(tx.round_time, UTC)


def translate_throw(asset_id: int, tx: TransactionPayload, props: ThrowProperties) -> Throw:
    confirmed_at = _round_time(tx)
    return Throw(
        local_id=chain_local_id(asset_id),
        ledger_id=asset_id,
        tx_id=tx.id,
        pod_type_id=props.pod_type_id,
        pod_type_name=props.pod_type_name,
        pod_type_icon=props.pod_type_icon,
        thrown_at=ensure_aware(props.throw_date) if props.throw_date else confirmed_at,
        location_label=props.location_label,
        growth_model_id=props.growth_model_id,
        thrown_by=props.thrown_by,
        confirmed_at=confirmed_at,
    )


def translate_harvest(tx: TransactionPayload, props: HarvestProperties) -> Harvest:
    confirmed_at = _round_time(tx)
    return Harvest(
        id=LedgerTxId(tx.id),
        throw_ledger_id=props.throw_asa_id,
        plant_id=props.plant_id,
        quantity=props.quantity_class,
        harvested_at=ensure_aware(props.harvested_at) if props.harvested_at else confirmed_at,
        notes=props.notes,
        confirmed_at=confirmed_at,
    )


def parse_throw_transaction(asset_id: int, tx: TransactionPayload) -> Throw | None:
    properties = parse_note(tx.note)
    if properties is None or properties.get("eden_type") != "throw":
        return None
    try:
        props = ThrowProperties.model_validate(properties)
    except ValidationError as exc:
        log.warning("Skipping malformed throw note in %s: %s", tx.id, exc)
        return None
    return translate_throw(asset_id, tx, props)


def parse_harvest_transaction(tx: TransactionPayload) -> Harvest | None:
    properties = parse_note(tx.note)
    if properties is None or properties.get("eden_type") != "harvest":
        return None
    try:
        props = HarvestProperties.model_validate(properties)
        return translate_harvest(tx, props)
    except (ValidationError, ValueError) as exc:
        log.warning("Skipping malformed harvest note in %s: %s", tx.id, exc)
        return None


__all__ = [
    "parse_harvest_transaction",
    "parse_throw_transaction",
    "translate_harvest",
    "translate_throw",
]
