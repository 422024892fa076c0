from __future__ import annotations

from datetime import timedelta

import pytest

from edensync.adapters.sqlalchemy import SqlAlchemyReconciliationCache
from edensync.app import build_owner_session, show_timeline
from edensync.config import ReconciliationSettings
from edensync.domain.reconciliation import OwnerSession
from tests.helpers.reconciliation import (
    BASE_TIME,
    OWNER,
    FakeHarvestQuery,
    FakeThrowQuery,
    FrozenClock,
    InMemoryCache,
    make_harvest,
    make_throw,
)


def test_show_timeline_reports_reconciled_state() -> None:
    throws = FakeThrowQuery(results={OWNER: [make_throw(1), make_throw(2, pod_type_id="mint")]})
    harvests = FakeHarvestQuery(results={OWNER: [make_harvest("TX-1")]})
    sessions: list[OwnerSession] = []

    def factory() -> OwnerSession:
        session = OwnerSession(
            throw_query=throws,
            harvest_query=harvests,
            cache=InMemoryCache(),
            clock=FrozenClock(BASE_TIME + timedelta(days=120)),
        )
        sessions.append(session)
        return session

    report = show_timeline(OWNER, session_factory=factory)

    assert report.owner_key == OWNER
    assert sorted(throw.ledger_id for throw in report.timeline) == [1, 2]
    assert len(report.harvests) == 1
    assert report.summary.total == 2
    assert report.summary.harvestable == 2
    assert all(reading.stage.id == "fruiting" for reading in report.stages)
    assert report.error is None
    assert sessions[0].owner_key is None


def test_show_timeline_watch_keeps_refreshing() -> None:
    throws = FakeThrowQuery(results={OWNER: [make_throw(1)]})

    def factory() -> OwnerSession:
        return OwnerSession(
            throw_query=throws,
            harvest_query=FakeHarvestQuery(),
            cache=InMemoryCache(),
            settings=ReconciliationSettings(poll_interval_seconds=0.01),
        )

    show_timeline(OWNER, watch_seconds=0.05, session_factory=factory)

    assert len(throws.calls) >= 2


def test_show_timeline_surfaces_ledger_errors() -> None:
    throws = FakeThrowQuery(failures=1)

    def factory() -> OwnerSession:
        return OwnerSession(
            throw_query=throws,
            harvest_query=FakeHarvestQuery(),
            cache=InMemoryCache(),
        )

    report = show_timeline(OWNER, session_factory=factory)

    assert report.error == "indexer unavailable"
    assert report.timeline == []


def test_build_owner_session_uses_configured_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_CACHE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("EDEN_CACHE_COMPAT_KEY", "v9")

    session = build_owner_session()

    assert session.owner_key is None
    assert session.settings.cache_compat_key == "v9"
    cache = session._cache  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    assert isinstance(cache, SqlAlchemyReconciliationCache)
    assert cache.compat_key == "v9"
