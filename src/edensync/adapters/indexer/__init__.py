"""Indexer adapter: reads throws and harvests from the ledger indexer."""

from __future__ import annotations

from .client import IndexerLedger
from .notes import build_harvest_note, build_throw_note, parse_note
from .writer import NoteLedgerWriter, NoteTransaction, NoteTransactionKind, TransactionSigner

__all__ = [
    "IndexerLedger",
    "NoteLedgerWriter",
    "NoteTransaction",
    "NoteTransactionKind",
    "TransactionSigner",
    "build_harvest_note",
    "build_throw_note",
    "parse_note",
]
