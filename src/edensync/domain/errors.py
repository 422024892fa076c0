"""Error taxonomy shared by the reconciliation core and its adapters."""

from __future__ import annotations

_CANCELLATION_MARKERS = ("closed", "rejected", "cancel")


class EdenSyncError(RuntimeError):
    """Base class for edensync domain errors."""


class LedgerQueryError(EdenSyncError):
    """The ledger could not be queried or returned an unusable response.

    Transient and advisory: callers keep their last known-good data and retry on the
    next poll tick or manual refresh.
    """


class SubmissionError(EdenSyncError):
    """A write was rejected or could not be dispatched to the ledger."""


class SubmissionCancelled(SubmissionError):
    """The user declined to sign the write; not shown as an advisory error."""


class NoActiveOwnerError(EdenSyncError):
    """A command needs an active owner session but none is active."""


def is_user_cancellation(exc: BaseException) -> bool:
    """Return whether ``exc`` looks like a wallet dialog the user dismissed."""

    if isinstance(exc, SubmissionCancelled):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _CANCELLATION_MARKERS)


__all__ = [
    "EdenSyncError",
    "LedgerQueryError",
    "NoActiveOwnerError",
    "SubmissionCancelled",
    "SubmissionError",
    "is_user_cancellation",
]
