from __future__ import annotations

from datetime import timedelta

from edensync.domain.reconciliation import (
    ReconciliationState,
    stage_notifications,
    summarize,
    unified_timeline,
)
from tests.helpers.reconciliation import BASE_TIME, OWNER, make_throw


def test_unified_timeline_lists_pending_first_and_hides_confirmed_duplicates() -> None:
    confirmed_old = make_throw(1, pod_type_id="mint", thrown_at=BASE_TIME)
    confirmed_new = make_throw(2, pod_type_id="sage", thrown_at=BASE_TIME + timedelta(days=2))
    pending = make_throw(local_id="local-p", pod_type_id="dill", is_pending=True)
    pending_already_confirmed = make_throw(
        2, local_id="local-2", pod_type_id="sage", is_pending=True
    )
    state = ReconciliationState(
        owner_key=OWNER,
        confirmed=[confirmed_old, confirmed_new],
        pending=[pending, pending_already_confirmed],
    )

    timeline = unified_timeline(state)

    assert [throw.local_id for throw in timeline] == ["local-p", "chain-2", "chain-1"]


def test_unified_timeline_has_unique_ledger_ids() -> None:
    state = ReconciliationState(
        owner_key=OWNER,
        confirmed=[make_throw(3)],
        pending=[make_throw(3, local_id="local-3", is_pending=True)],
    )

    ledger_ids = [throw.ledger_id for throw in unified_timeline(state) if throw.has_ledger_id]

    assert ledger_ids == [3]


def test_stage_notifications_skip_pending_and_unknown_models() -> None:
    now = BASE_TIME + timedelta(days=110)
    confirmed = [
        make_throw(1),
        make_throw(2, growth_model_id="unknown-model"),
        make_throw(local_id="local-x", is_pending=True),
    ]

    notifications = stage_notifications(confirmed, now=now)

    assert len(notifications) == 1
    reading = notifications[0]
    assert reading.ledger_id == 1
    assert reading.stage.id == "fruiting"
    assert reading.days_since == 110
    assert reading.progress_percent == 61
    assert reading.is_harvestable


def test_summarize_counts_pending_dominant_and_harvestable() -> None:
    now = BASE_TIME + timedelta(days=150)
    timeline = [
        make_throw(local_id="local-new", pod_type_id="a", thrown_at=now, is_pending=True),
        make_throw(1, pod_type_id="b", thrown_at=now - timedelta(days=3)),
        make_throw(2, pod_type_id="c"),
    ]

    summary = summarize(timeline, now=now)

    assert summary.total == 3
    assert summary.pending == 1
    assert summary.dominant_stage is not None
    assert summary.dominant_stage.id == "dormant"
    assert summary.harvestable == 1


def test_summarize_empty_timeline() -> None:
    summary = summarize([], now=BASE_TIME)

    assert summary.total == 0
    assert summary.dominant_stage is None
    assert summary.harvestable == 0
