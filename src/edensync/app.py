"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from edensync.adapters.indexer import IndexerLedger
from edensync.adapters.sqlalchemy import SqlAlchemyReconciliationCache, create_cache_engine
from edensync.config import get_cache_uri, get_reconciliation_settings
from edensync.domain.reconciliation import OwnerSession

if TYPE_CHECKING:
    from collections.abc import Callable

    from edensync.config import ReconciliationSettings
    from edensync.domain.model import Harvest, Throw
    from edensync.domain.ports import LedgerWriter, ReconciliationCache
    from edensync.domain.reconciliation import StageNotification, TimelineSummary

type SessionFactory = Callable[[], OwnerSession]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimelineReport:
    owner_key: str
    timeline: list[Throw]
    harvests: list[Harvest]
    stages: list[StageNotification]
    summary: TimelineSummary
    error: str | None = None


def build_owner_session(
    *,
    ledger: IndexerLedger | None = None,
    cache: ReconciliationCache | None = None,
    writer: LedgerWriter | None = None,
    settings: ReconciliationSettings | None = None,
) -> OwnerSession:
    """Wire the indexer, the SQLAlchemy cache and settings into an ``OwnerSession``."""

    effective_settings = settings or get_reconciliation_settings()
    effective_ledger = ledger or IndexerLedger()
    effective_cache = cache or SqlAlchemyReconciliationCache(
        create_cache_engine(get_cache_uri()),
        compat_key=effective_settings.cache_compat_key,
    )
    return OwnerSession(
        throw_query=effective_ledger.query_throws,
        harvest_query=effective_ledger.query_harvests,
        cache=effective_cache,
        writer=writer,
        settings=effective_settings,
    )


async def collect_timeline(
    session: OwnerSession,
    owner_key: str,
    *,
    watch_seconds: float | None = None,
    interval_seconds: float | None = None,
) -> TimelineReport:
    """Activate ``owner_key`` and optionally keep refreshing for ``watch_seconds``."""

    await session.set_owner(owner_key)
    if watch_seconds:
        interval = interval_seconds or session.settings.poll_interval_seconds
        loop = asyncio.get_running_loop()
        deadline = loop.time() + watch_seconds
        while (remaining := deadline - loop.time()) > 0:
            await asyncio.sleep(min(interval, remaining))
            await session.refresh_now()

    return TimelineReport(
        owner_key=owner_key,
        timeline=session.timeline,
        harvests=session.harvests,
        stages=session.stage_notifications(),
        summary=session.summary(),
        error=session.error,
    )


def show_timeline(
    owner_key: str,
    *,
    watch_seconds: float | None = None,
    session_factory: SessionFactory = build_owner_session,
) -> TimelineReport:
    """Load, reconcile and report the timeline of one owner."""

    async def run() -> TimelineReport:
        session = session_factory()
        try:
            return await collect_timeline(session, owner_key, watch_seconds=watch_seconds)
        finally:
            await session.close()

    log.info("Loading timeline for %s (watch=%s)", owner_key, watch_seconds)
    report = asyncio.run(run())
    log.info(
        "Timeline for %s: total=%s, pending=%s, harvests=%s",
        owner_key,
        report.summary.total,
        report.summary.pending,
        len(report.harvests),
    )
    return report


__all__ = ["TimelineReport", "build_owner_session", "collect_timeline", "show_timeline"]
