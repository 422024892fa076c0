"""Pure merge and filter functions used by the reconciliation engine.

Nothing here performs I/O or mutates its inputs; every function returns new lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime, timedelta

    from edensync.domain.model import Harvest, HarvestId, LedgerTxId, PlaceholderId, Throw


# -- throws ---------------------------------------------------------------------------


def normalize_confirmed(throws: Iterable[Throw]) -> list[Throw]:
    """Deduplicate a confirmed query result by ledger id, newest event first.

    Entries without a ledger id cannot be confirmed and are dropped. When the same
    ledger id appears twice the later entry wins, so merging the same result twice
    yields the same list.
    """

    by_ledger_id: dict[int, Throw] = {}
    for throw in throws:
        if not throw.has_ledger_id:
            continue
        by_ledger_id[throw.ledger_id] = throw.as_confirmed()
    return sorted(by_ledger_id.values(), key=lambda throw: throw.thrown_at, reverse=True)


def expire_pending(
    pending: Iterable[Throw],
    *,
    now: datetime,
    ttl: timedelta,
) -> list[Throw]:
    """Drop pending throws created more than ``ttl`` ago.

    Throws without a creation stamp are kept; older cache records lack one.
    """

    cutoff = now - ttl
    return [throw for throw in pending if throw.created_at is None or throw.created_at > cutoff]


@dataclass(frozen=True, slots=True)
class PendingRetirement:
    still_pending: list[Throw]
    retired: list[Throw]
    confirmed_count_at_last_submit: int


def retire_pending(
    pending: Sequence[Throw],
    confirmed: Sequence[Throw],
    *,
    confirmed_count_at_last_submit: int,
) -> PendingRetirement:
    """Split ``pending`` into throws still waiting and throws now represented in ``confirmed``.

    A pending throw is retired when its ledger id or its content fingerprint appears
    among the confirmed throws. After that, growth of ``confirmed`` beyond the snapshot
    taken at the last submit presumes that many additional submissions landed under
    ids we could not match: that many pending throws without a ledger id are retired,
    oldest first. The returned snapshot advances by the number retired so the same
    growth is never spent twice, and it never moves backwards when ``confirmed``
    comes back shorter than before.
    """

    confirmed_ids = {throw.ledger_id for throw in confirmed}
    confirmed_fingerprints = {throw.fingerprint for throw in confirmed}

    matched: list[Throw] = []
    unmatched: list[Throw] = []
    for throw in pending:
        if (throw.has_ledger_id and throw.ledger_id in confirmed_ids) or (
            throw.fingerprint in confirmed_fingerprints
        ):
            matched.append(throw)
        else:
            unmatched.append(throw)

    growth = len(confirmed) - confirmed_count_at_last_submit
    budget = max(0, growth - len(matched))

    # pending is newest first; the oldest submission is the likeliest to have landed
    presumed: set[str] = set()
    for throw in reversed(unmatched):
        if len(presumed) >= budget:
            break
        if throw.has_ledger_id:
            continue
        presumed.add(throw.local_id)

    still_pending = [throw for throw in unmatched if throw.local_id not in presumed]
    retired = matched + [throw for throw in unmatched if throw.local_id in presumed]
    # an incomplete result must never lower the snapshot, or the next full one reads as growth
    advanced = min(len(confirmed), confirmed_count_at_last_submit + len(retired))
    return PendingRetirement(
        still_pending=still_pending,
        retired=retired,
        confirmed_count_at_last_submit=max(confirmed_count_at_last_submit, advanced, 0),
    )


# -- harvests -------------------------------------------------------------------------


def _harvest_sort_key(harvest: Harvest) -> tuple[int, float]:
    if harvest.is_placeholder:
        return (0, 0.0)
    return (1, -harvest.harvested_at.timestamp())


def merge_harvests(existing: Iterable[Harvest], incoming: Iterable[Harvest]) -> list[Harvest]:
    """Union harvests by id, incoming entries replacing existing ones.

    Placeholders come first in their original order, followed by confirmed harvests
    with the newest harvest first. A placeholder whose content matches a confirmed
    harvest has already landed on the ledger and is dropped.
    """

    merged: dict[HarvestId, Harvest] = {harvest.id: harvest for harvest in existing}
    for harvest in incoming:
        merged[harvest.id] = harvest

    confirmed_fingerprints = {h.fingerprint for h in merged.values() if not h.is_placeholder}
    survivors = [
        harvest
        for harvest in merged.values()
        if not (harvest.is_placeholder and harvest.fingerprint in confirmed_fingerprints)
    ]
    return sorted(survivors, key=_harvest_sort_key)


def add_harvest(existing: Sequence[Harvest], harvest: Harvest) -> list[Harvest]:
    """Prepend ``harvest``, or replace the entry that already carries its id."""

    if any(item.id == harvest.id for item in existing):
        return [harvest if item.id == harvest.id else item for item in existing]
    return [harvest, *existing]


def confirm_harvest(
    existing: Sequence[Harvest],
    placeholder_id: PlaceholderId,
    real_id: LedgerTxId,
) -> list[Harvest]:
    """Rename the placeholder harvest to its ledger id in place.

    If a harvest with ``real_id`` is already known (a query beat the confirmation),
    the placeholder is dropped instead so only one record remains. Unknown
    placeholders leave the list unchanged.
    """

    if not any(item.id == placeholder_id for item in existing):
        return list(existing)
    if any(item.id == real_id for item in existing):
        return [item for item in existing if item.id != placeholder_id]
    return [item.renamed(real_id) if item.id == placeholder_id else item for item in existing]


def remove_harvest(existing: Iterable[Harvest], harvest_id: HarvestId) -> list[Harvest]:
    return [item for item in existing if item.id != harvest_id]


__all__ = [
    "PendingRetirement",
    "add_harvest",
    "confirm_harvest",
    "expire_pending",
    "merge_harvests",
    "normalize_confirmed",
    "remove_harvest",
    "retire_pending",
]
