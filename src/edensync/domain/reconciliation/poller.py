"""Interval-driven confirmation polling with a hard attempt ceiling."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from edensync.config.reconciliation import DEFAULT_MAX_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL_SECONDS

if TYPE_CHECKING:
    from .state import RefreshResult

log = getLogger(__name__)


class PollerState(StrEnum):
    IDLE = "idle"
    POLLING = "polling"
    TERMINATED = "terminated"


class PollTarget(Protocol):
    """What the poller drives; implemented by ``ReconciliationEngine``."""

    async def refresh(self) -> RefreshResult: ...

    def abandon_pending(self) -> None: ...


@dataclass(slots=True)
class _PollRun:
    """Cancellation token for one poll loop."""

    owner_key: str
    stopped: bool = False
    ticking: bool = False
    task: asyncio.Task[None] | None = None


class ConfirmationPoller:
    """Re-query the ledger every ``interval_seconds`` until nothing is pending.

    After ``max_attempts`` ticks the pending throws are presumed lost: they are
    abandoned and the poller moves to ``TERMINATED``. A failing tick is logged and
    retried on the next one. ``stop()`` only cancels a sleeping timer; a tick that is
    already querying the ledger finishes and its result is still applied.
    """

    def __init__(
        self,
        target: PollTarget,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS,
    ) -> None:
        self._target = target
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self._run: _PollRun | None = None
        self._state = PollerState.IDLE
        self.attempts = 0

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def owner_key(self) -> str | None:
        return self._run.owner_key if self._run is not None else None

    @property
    def is_running(self) -> bool:
        return self._run is not None and not self._run.stopped

    def start(self, owner_key: str) -> None:
        """Begin polling for ``owner_key``, replacing any loop already running."""

        if self._run is not None and self._run.owner_key != owner_key:
            log.debug("Replacing poll loop for %s with %s", self._run.owner_key, owner_key)
        self.stop()

        run = _PollRun(owner_key=owner_key)
        self._run = run
        self.attempts = 0
        self._state = PollerState.POLLING
        run.task = asyncio.get_running_loop().create_task(
            self._loop(run),
            name=f"confirmation-poller:{owner_key}",
        )
        log.debug("Started confirmation polling for %s", owner_key)

    def stop(self) -> None:
        run = self._run
        if run is None or run.stopped:
            return
        run.stopped = True
        if self._state is PollerState.POLLING:
            self._state = PollerState.IDLE
        if run.task is not None and not run.ticking:
            run.task.cancel()
        log.debug("Stopped confirmation polling for %s", run.owner_key)

    async def join(self) -> None:
        """Wait until the current loop (if any) has finished."""

        run = self._run
        if run is None or run.task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await run.task

    async def _loop(self, run: _PollRun) -> None:
        while not run.stopped:
            await asyncio.sleep(self.interval_seconds)
            if run.stopped:
                return

            self.attempts += 1
            if self.attempts > self.max_attempts:
                self._terminate(run)
                return

            run.ticking = True
            try:
                result = await self._target.refresh()
            except Exception as exc:  # noqa: BLE001
                log.warning(
                    "Poll attempt %s for %s failed: %s",
                    self.attempts,
                    run.owner_key,
                    exc,
                )
                continue
            finally:
                run.ticking = False

            if result.pending == 0:
                run.stopped = True
                if self._run is run:
                    self._state = PollerState.IDLE
                log.debug("Nothing pending for %s, polling finished", run.owner_key)
                return

    def _terminate(self, run: _PollRun) -> None:
        log.info(
            "No confirmation for %s after %s attempts, dropping pending throws",
            run.owner_key,
            self.max_attempts,
        )
        self._target.abandon_pending()
        run.stopped = True
        if self._run is run:
            self._state = PollerState.TERMINATED


__all__ = ["ConfirmationPoller", "PollTarget", "PollerState"]
