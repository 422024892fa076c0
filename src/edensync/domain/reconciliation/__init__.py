"""Reconciliation of optimistic local submissions with ledger-confirmed state.

Layered flow for one owner:
1) ``OwnerSession`` loads the cached collections into a ``ReconciliationEngine``
2) the engine refreshes immediately, then the ``ConfirmationPoller`` re-queries
   the ledger while anything is pending
3) each refresh replaces confirmed throws, merges harvests and retires or expires
   pending throws (pure functions in ``merge``)
4) ``view`` projects the state into the unified timeline and stage readings
"""

from __future__ import annotations

from .engine import ReconciliationEngine
from .poller import ConfirmationPoller, PollerState
from .session import OwnerSession, SessionState
from .state import ReconciliationState, RefreshResult
from .view import (
    StageNotification,
    TimelineSummary,
    stage_notifications,
    summarize,
    unified_timeline,
)

__all__ = [
    "ConfirmationPoller",
    "OwnerSession",
    "PollerState",
    "ReconciliationEngine",
    "ReconciliationState",
    "RefreshResult",
    "SessionState",
    "StageNotification",
    "TimelineSummary",
    "stage_notifications",
    "summarize",
    "unified_timeline",
]
