"""Single-writer state container reconciling local submissions with the ledger.

One ``ReconciliationEngine`` exists per active owner. All mutation of its
``ReconciliationState`` goes through the methods below; the poller and the view
functions receive the engine (or its state) explicitly. Refreshes are serialised by
an ``asyncio.Lock`` so a manual refresh and a poll tick never interleave their
writes. The remaining operations contain no suspension points and therefore run
atomically with respect to other tasks on the loop.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from edensync.config.reconciliation import ReconciliationSettings
from edensync.domain.clock import utcnow
from edensync.domain.errors import LedgerQueryError
from edensync.domain.ports import CONFIRMED_THROWS, HARVESTS, PENDING_THROWS

from . import merge
from .state import ReconciliationState, RefreshResult

if TYPE_CHECKING:
    from edensync.domain.clock import Clock
    from edensync.domain.model import Harvest, HarvestId, LedgerTxId, PlaceholderId, Throw
    from edensync.domain.ports import HarvestQuery, ReconciliationCache, ThrowQuery

log = getLogger(__name__)


class ReconciliationEngine:
    def __init__(
        self,
        owner_key: str,
        *,
        throw_query: ThrowQuery,
        harvest_query: HarvestQuery,
        cache: ReconciliationCache,
        settings: ReconciliationSettings | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.owner_key = owner_key
        self.state = ReconciliationState(owner_key=owner_key)
        self._throw_query = throw_query
        self._harvest_query = harvest_query
        self._cache = cache
        self._settings = settings or ReconciliationSettings()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self.state.pending)

    def load(self) -> None:
        """Prime the state from the cache, dropping expired pending throws."""

        confirmed = merge.normalize_confirmed(self._cache.load(self.owner_key, CONFIRMED_THROWS))
        loaded_pending = self._cache.load(self.owner_key, PENDING_THROWS)
        pending = merge.expire_pending(
            loaded_pending,
            now=self._clock(),
            ttl=self._settings.pending_ttl,
        )
        harvests = merge.merge_harvests([], self._cache.load(self.owner_key, HARVESTS))

        self.state.confirmed = confirmed
        self.state.pending = pending
        self.state.harvests = harvests
        self.state.confirmed_count_at_last_submit = len(confirmed)
        if len(pending) != len(loaded_pending):
            self._cache.save(self.owner_key, PENDING_THROWS, pending)
        log.debug(
            "Loaded cache for %s: confirmed=%s, pending=%s (expired %s), harvests=%s",
            self.owner_key,
            len(confirmed),
            len(pending),
            len(loaded_pending) - len(pending),
            len(harvests),
        )

    async def refresh(self) -> RefreshResult:
        """Query the ledger and fold the result into the state.

        Raises ``LedgerQueryError`` when confirmed throws cannot be read; the state is
        left untouched in that case. A failing harvest query degrades to an empty
        result.
        """

        async with self._lock:
            fetched, (harvests, degraded) = await asyncio.gather(
                self._throw_query(self.owner_key),
                self._query_harvests(),
            )
            if self._closed:
                log.debug("Discarding refresh result for closed session %s", self.owner_key)
                return RefreshResult(confirmed=0, harvests=0, pending=0, discarded=True)
            return self._apply_refresh(fetched, harvests, degraded=degraded)

    async def _query_harvests(self) -> tuple[list[Harvest], bool]:
        try:
            return await self._harvest_query(self.owner_key), False
        except LedgerQueryError as exc:
            log.warning("Harvest query for %s failed, treating as empty: %s", self.owner_key, exc)
            return [], True

    def _apply_refresh(
        self,
        fetched: list[Throw],
        harvests: list[Harvest],
        *,
        degraded: bool,
    ) -> RefreshResult:
        state = self.state

        # confirmed is replaced before pending is filtered against it
        state.confirmed = merge.normalize_confirmed(fetched)
        self._cache.save(self.owner_key, CONFIRMED_THROWS, state.confirmed)

        state.harvests = merge.merge_harvests(state.harvests, harvests)
        self._cache.save(self.owner_key, HARVESTS, state.harvests)

        fresh = merge.expire_pending(
            state.pending,
            now=self._clock(),
            ttl=self._settings.pending_ttl,
        )
        retirement = merge.retire_pending(
            fresh,
            state.confirmed,
            confirmed_count_at_last_submit=state.confirmed_count_at_last_submit,
        )
        expired = len(state.pending) - len(fresh)
        state.pending = retirement.still_pending
        state.confirmed_count_at_last_submit = retirement.confirmed_count_at_last_submit
        self._cache.save(self.owner_key, PENDING_THROWS, state.pending)

        if retirement.retired:
            log.info(
                "Retired %s pending throw(s) for %s",
                len(retirement.retired),
                self.owner_key,
            )
        return RefreshResult(
            confirmed=len(state.confirmed),
            harvests=len(state.harvests),
            pending=len(state.pending),
            retired=len(retirement.retired),
            expired=expired,
            harvests_degraded=degraded,
        )

    def submit_pending(self, throw: Throw) -> Throw:
        """Record a locally dispatched throw until the ledger confirms it."""

        state = self.state
        state.confirmed_count_at_last_submit = len(state.confirmed)
        stamped = throw.as_pending(self._clock())
        state.pending = [stamped, *(p for p in state.pending if p.local_id != stamped.local_id)]
        self._cache.save(self.owner_key, PENDING_THROWS, state.pending)
        log.info("Submitted pending throw %s for %s", stamped.local_id, self.owner_key)
        return stamped

    def abandon_pending(self) -> None:
        """Forget every pending throw; the ledger never confirmed them in time."""

        if self.state.pending:
            log.info(
                "Abandoning %s unconfirmed throw(s) for %s",
                len(self.state.pending),
                self.owner_key,
            )
        self.state.pending = []
        self._cache.save(self.owner_key, PENDING_THROWS, [])

    def add_optimistic_harvest(self, harvest: Harvest) -> None:
        self.state.harvests = merge.add_harvest(self.state.harvests, harvest)
        self._cache.save(self.owner_key, HARVESTS, self.state.harvests)

    def confirm_harvest(self, placeholder_id: PlaceholderId, real_id: LedgerTxId) -> None:
        self.state.harvests = merge.confirm_harvest(self.state.harvests, placeholder_id, real_id)
        self._cache.save(self.owner_key, HARVESTS, self.state.harvests)
        log.debug("Confirmed harvest %s as %s", placeholder_id, real_id)

    def remove_harvest(self, harvest_id: HarvestId) -> None:
        self.state.harvests = merge.remove_harvest(self.state.harvests, harvest_id)
        self._cache.save(self.owner_key, HARVESTS, self.state.harvests)

    def close(self) -> None:
        """Stop applying results; in-flight refreshes finish without touching state."""

        self._closed = True
