"""Owner session lifecycle and the command surface offered to presentation code."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from edensync.config.reconciliation import ReconciliationSettings
from edensync.domain.clock import utcnow
from edensync.domain.errors import (
    LedgerQueryError,
    NoActiveOwnerError,
    SubmissionCancelled,
    SubmissionError,
    is_user_cancellation,
)
from edensync.domain.growth import resolve_growth_stage
from edensync.domain.model import Harvest, LedgerTxId, PlaceholderId, Throw
from edensync.domain.ports import HarvestWrite, ThrowWrite

from .engine import ReconciliationEngine
from .poller import ConfirmationPoller, PollerState
from .view import stage_notifications, summarize, unified_timeline

if TYPE_CHECKING:
    from edensync.domain.clock import Clock
    from edensync.domain.model import HarvestDraft, HarvestId, ThrowDraft
    from edensync.domain.ports import (
        GrowthStageResolver,
        HarvestQuery,
        LedgerWriter,
        ReconciliationCache,
        ThrowQuery,
        WriteHandle,
        WritePayload,
    )

    from .state import RefreshResult
    from .view import StageNotification, TimelineSummary

log = getLogger(__name__)


class SessionState(StrEnum):
    NO_OWNER = "no_owner"
    LOADING = "loading"
    ACTIVE = "active"


class OwnerSession:
    """Holds the engine and poller for whichever owner is currently active.

    Switching owners tears down the previous engine and poller before anything is
    loaded for the next owner, so no state crosses between identities.
    """

    def __init__(
        self,
        *,
        throw_query: ThrowQuery,
        harvest_query: HarvestQuery,
        cache: ReconciliationCache,
        writer: LedgerWriter | None = None,
        settings: ReconciliationSettings | None = None,
        resolver: GrowthStageResolver = resolve_growth_stage,
        clock: Clock = utcnow,
    ) -> None:
        self._throw_query = throw_query
        self._harvest_query = harvest_query
        self._cache = cache
        self._writer = writer
        self._settings = settings or ReconciliationSettings()
        self._resolver = resolver
        self._clock = clock

        self._state = SessionState.NO_OWNER
        self._engine: ReconciliationEngine | None = None
        self._poller: ConfirmationPoller | None = None
        self.loading = False
        self.error: str | None = None
        self.submission_error: str | None = None

    # -- observable surface -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def settings(self) -> ReconciliationSettings:
        return self._settings

    @property
    def owner_key(self) -> str | None:
        return self._engine.owner_key if self._engine is not None else None

    @property
    def engine(self) -> ReconciliationEngine | None:
        return self._engine

    @property
    def poller_state(self) -> PollerState:
        return self._poller.state if self._poller is not None else PollerState.IDLE

    @property
    def timeline(self) -> list[Throw]:
        if self._engine is None:
            return []
        return unified_timeline(self._engine.state)

    @property
    def harvests(self) -> list[Harvest]:
        if self._engine is None:
            return []
        return list(self._engine.state.harvests)

    @property
    def has_pending(self) -> bool:
        return any(throw.is_pending for throw in self.timeline)

    def stage_notifications(self) -> list[StageNotification]:
        if self._engine is None:
            return []
        return stage_notifications(
            self._engine.state.confirmed,
            resolver=self._resolver,
            now=self._clock(),
        )

    def summary(self) -> TimelineSummary:
        return summarize(self.timeline, resolver=self._resolver, now=self._clock())

    # -- lifecycle --------------------------------------------------------------------

    async def set_owner(self, owner_key: str | None) -> None:
        """React to the owner identity appearing, changing or going away."""

        if owner_key is not None and owner_key == self.owner_key:
            return

        self._deactivate()
        if owner_key is None:
            return

        self._state = SessionState.LOADING
        engine = ReconciliationEngine(
            owner_key,
            throw_query=self._throw_query,
            harvest_query=self._harvest_query,
            cache=self._cache,
            settings=self._settings,
            clock=self._clock,
        )
        engine.load()
        poller = ConfirmationPoller(
            engine,
            interval_seconds=self._settings.poll_interval_seconds,
            max_attempts=self._settings.max_poll_attempts,
        )
        self._engine = engine
        self._poller = poller
        self._state = SessionState.ACTIVE
        log.info("Owner %s active", owner_key)

        if engine.pending_count > 0:
            poller.start(owner_key)
        await self._refresh(engine)

    def _deactivate(self) -> None:
        if self._poller is not None:
            self._poller.stop()
        if self._engine is not None:
            self._engine.close()
            log.info("Owner %s inactive", self._engine.owner_key)
        self._engine = None
        self._poller = None
        self._state = SessionState.NO_OWNER
        self.loading = False
        self.error = None
        self.submission_error = None

    async def close(self) -> None:
        poller = self._poller
        self._deactivate()
        if poller is not None:
            await poller.join()

    # -- commands ---------------------------------------------------------------------

    async def refresh_now(self) -> RefreshResult | None:
        engine = self._require_engine()
        return await self._refresh(engine)

    async def _refresh(self, engine: ReconciliationEngine) -> RefreshResult | None:
        self.loading = True
        try:
            result = await engine.refresh()
        except LedgerQueryError as exc:
            if engine is self._engine:
                self.error = str(exc) or "Ledger query failed"
            log.warning("Refresh for %s failed: %s", engine.owner_key, exc)
            return None
        finally:
            if engine is self._engine:
                self.loading = False

        if engine is not self._engine:
            return result
        self.error = None
        if result.pending == 0 and self._poller is not None:
            self._poller.stop()
        return result

    async def submit_pending_write(self, draft: ThrowDraft) -> Throw:
        """Dispatch a throw and track it as pending until the ledger confirms it.

        Failed or cancelled writes raise and leave the state untouched.
        """

        engine = self._require_engine()
        handle = await self._submit(ThrowWrite(owner_key=engine.owner_key, draft=draft))
        if engine is not self._engine:
            raise NoActiveOwnerError("Owner changed while the throw was being submitted")

        throw = Throw.from_draft(
            draft,
            local_id=uuid4().hex,
            ledger_id=handle.asset_id or 0,
            tx_id=handle.primary_tx_id,
        )
        pending = engine.submit_pending(throw)
        if self._poller is not None:
            self._poller.start(engine.owner_key)
        return pending

    async def submit_harvest(self, draft: HarvestDraft) -> Harvest:
        """Show a harvest immediately under a placeholder id, then rename it once written."""

        engine = self._require_engine()
        placeholder = PlaceholderId.new()
        engine.add_optimistic_harvest(Harvest.from_draft(draft, harvest_id=placeholder))
        try:
            handle = await self._submit(HarvestWrite(owner_key=engine.owner_key, draft=draft))
        except SubmissionError:
            engine.remove_harvest(placeholder)
            raise

        tx_id = handle.primary_tx_id
        if tx_id is None:
            engine.remove_harvest(placeholder)
            raise SubmissionError("Ledger writer returned no transaction id for the harvest")
        real_id = LedgerTxId(tx_id)
        engine.confirm_harvest(placeholder, real_id)
        return Harvest.from_draft(draft, harvest_id=real_id)

    def add_optimistic_harvest(self, harvest: Harvest) -> None:
        self._require_engine().add_optimistic_harvest(harvest)

    def confirm_harvest(self, placeholder_id: PlaceholderId, real_id: LedgerTxId) -> None:
        self._require_engine().confirm_harvest(placeholder_id, real_id)

    def remove_harvest(self, harvest_id: HarvestId) -> None:
        self._require_engine().remove_harvest(harvest_id)

    async def _submit(self, payload: WritePayload) -> WriteHandle:
        if self._writer is None:
            raise SubmissionError("No ledger writer configured")
        self.submission_error = None
        try:
            return await self._writer.submit(payload)
        except SubmissionCancelled:
            log.info("Write cancelled by user")
            raise
        except Exception as exc:
            if is_user_cancellation(exc):
                log.info("Write cancelled by user: %s", exc)
                raise SubmissionCancelled(str(exc)) from exc
            self.submission_error = str(exc) or type(exc).__name__
            if isinstance(exc, SubmissionError):
                raise
            raise SubmissionError(self.submission_error) from exc

    def _require_engine(self) -> ReconciliationEngine:
        if self._engine is None:
            raise NoActiveOwnerError("No owner is active")
        return self._engine


__all__ = ["OwnerSession", "SessionState"]
