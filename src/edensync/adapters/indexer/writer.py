"""Ledger writer that encodes drafts as ARC-69 notes and hands them to a signer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from edensync.domain.ports import HarvestWrite, ThrowWrite

from .notes import build_harvest_note, build_throw_note

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from edensync.domain.ports import LedgerWriter, WriteHandle, WritePayload

log = getLogger(__name__)

THROW_UNIT_NAME = "THROW"
MAX_ASSET_NAME_BYTES = 32


class NoteTransactionKind(StrEnum):
    ASSET_CREATE = "acfg"
    SELF_PAYMENT = "pay"


@dataclass(frozen=True, slots=True)
class NoteTransaction:
    """An unsigned transaction carrying an edensync note.

    Throws become single-unit asset creations, harvests zero-amount payments from the
    owner to itself.
    """

    kind: NoteTransactionKind
    sender: str
    note: bytes
    asset_name: str | None = None
    unit_name: str | None = None


type TransactionSigner = Callable[[NoteTransaction], Awaitable[WriteHandle]]


def throw_asset_name(icon: str, name: str) -> str:
    """Label for a throw asset, cut to the 32 bytes the ledger accepts for asset names."""

    encoded = f"Eden Throw {icon} {name}".strip().encode()[:MAX_ASSET_NAME_BYTES]
    # a cut inside a multi-byte character leaves a partial sequence to discard
    return encoded.decode(errors="ignore")


def build_transaction(payload: WritePayload) -> NoteTransaction:
    match payload:
        case ThrowWrite(owner_key=owner_key, draft=draft):
            return NoteTransaction(
                kind=NoteTransactionKind.ASSET_CREATE,
                sender=owner_key,
                note=build_throw_note(draft),
                asset_name=throw_asset_name(draft.pod_type_icon, draft.pod_type_name),
                unit_name=THROW_UNIT_NAME,
            )
        case HarvestWrite(owner_key=owner_key, draft=draft):
            return NoteTransaction(
                kind=NoteTransactionKind.SELF_PAYMENT,
                sender=owner_key,
                note=build_harvest_note(draft),
            )


@dataclass(slots=True)
class NoteLedgerWriter:
    """``LedgerWriter`` that delegates signing and dispatch to ``signer``.

    The signer owns the wallet session; its exceptions propagate unchanged so the
    session can tell a dismissed signing dialog from a failed write.
    """

    signer: TransactionSigner

    async def submit(self, payload: WritePayload) -> WriteHandle:
        transaction = build_transaction(payload)
        log.debug("Submitting %s note transaction for %s", transaction.kind, transaction.sender)
        return await self.signer(transaction)


if TYPE_CHECKING:

    async def _signer_check(transaction: NoteTransaction) -> WriteHandle: ...

    _writer_check: LedgerWriter = NoteLedgerWriter(_signer_check)
