from __future__ import annotations

from datetime import UTC, datetime

import pytest

from edensync.domain.model import (
    LedgerTxId,
    PlaceholderId,
    QuantityClass,
    Throw,
    ThrowDraft,
    harvest_id_from_str,
    harvest_id_to_str,
)
from tests.helpers.reconciliation import make_harvest


def test_placeholder_ids_serialise_with_reserved_prefix() -> None:
    placeholder = PlaceholderId("abc")

    assert harvest_id_to_str(placeholder) == "pending-abc"
    assert harvest_id_from_str("pending-abc") == placeholder
    assert harvest_id_from_str("TX-1") == LedgerTxId("TX-1")


def test_new_placeholders_are_unique() -> None:
    assert PlaceholderId.new() != PlaceholderId.new()


@pytest.mark.parametrize("value", ["", "pending-123"])
def test_ledger_tx_id_rejects_empty_and_reserved_values(value: str) -> None:
    with pytest.raises(ValueError):
        LedgerTxId(value)


def test_renamed_harvest_keeps_content() -> None:
    placeholder = make_harvest(PlaceholderId("p1"), plant_id="tomato", notes="ripe")

    renamed = placeholder.renamed(LedgerTxId("TX-7"))

    assert renamed.id == LedgerTxId("TX-7")
    assert not renamed.is_placeholder
    assert placeholder.is_placeholder
    assert renamed.fingerprint == placeholder.fingerprint


def test_quantity_class_rank_orders_sizes() -> None:
    assert QuantityClass.SMALL.rank < QuantityClass.MEDIUM.rank < QuantityClass.LARGE.rank


def test_throw_confirmation_round_trip() -> None:
    draft = ThrowDraft(
        pod_type_id="basil",
        pod_type_name="Basil",
        pod_type_icon="🌿",
        thrown_at=datetime(2025, 1, 1, tzinfo=UTC),
        location_label="Balcony",
        growth_model_id="temperate-herb",
        thrown_by="OWNER",
    )
    created = datetime(2025, 1, 2, tzinfo=UTC)

    pending = Throw.from_draft(draft, local_id="local-1", ledger_id=12).as_pending(created)
    confirmed = pending.as_confirmed()

    assert pending.is_pending
    assert pending.created_at == created
    assert confirmed.local_id == "chain-12"
    assert not confirmed.is_pending
    assert confirmed.created_at is None
    assert confirmed.fingerprint == pending.fingerprint
