"""SQLAlchemy-backed implementation of the reconciliation cache port."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from pydantic import ValidationError
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from edensync.config.reconciliation import DEFAULT_CACHE_COMPAT_KEY
from edensync.domain.clock import utcnow
from edensync.domain.model import Throw
from edensync.domain.ports import CONFIRMED_THROWS, HARVESTS, PENDING_THROWS

from .mappings import cache_records_table
from .schema import (
    CachePayload,
    dump_harvest,
    dump_throw,
    load_confirmed_throw,
    load_harvest,
    load_pending_throw,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from edensync.domain.clock import Clock
    from edensync.domain.ports import CacheCollection, ReconciliationCache

log = getLogger(__name__)

KEY_PREFIX = "eden"


@dataclass(frozen=True, slots=True)
class _Codec[T]:
    dump: Callable[[T], dict[str, object]]
    load: Callable[[dict[str, object]], T]
    keep: Callable[[T], bool] = lambda _item: True
    delete_when_empty: bool = False


def _is_on_ledger(throw: Throw) -> bool:
    return throw.ledger_id > 0


_CODECS: dict[str, _Codec[Any]] = {
    CONFIRMED_THROWS.name: _Codec[Throw](dump_throw, load_confirmed_throw, keep=_is_on_ledger),
    PENDING_THROWS.name: _Codec[Throw](dump_throw, load_pending_throw, delete_when_empty=True),
    HARVESTS.name: _Codec(dump_harvest, load_harvest),
}


def storage_key(owner_key: str, collection: str, compat_key: str) -> str:
    return f"{KEY_PREFIX}-{collection}-{compat_key}-{owner_key}"


class SqlAlchemyReconciliationCache:
    """Per-owner collections stored as JSON blobs in a single table.

    The cache is advisory: read problems yield an empty collection and write
    problems are logged, never raised.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        compat_key: str = DEFAULT_CACHE_COMPAT_KEY,
        clock: Clock = utcnow,
    ) -> None:
        self._engine = engine
        self.compat_key = compat_key
        self._clock = clock

    def load[T](self, owner_key: str, collection: CacheCollection[T]) -> list[T]:
        codec = cast(_Codec[T], _CODECS[collection.name])
        key = storage_key(owner_key, collection.name, self.compat_key)
        try:
            with self._engine.connect() as conn:
                payload = conn.execute(
                    select(cache_records_table.c.payload).where(cache_records_table.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            log.warning("Could not read cache record %s: %s", key, exc)
            return []
        if payload is None:
            return []

        try:
            envelope = CachePayload.model_validate_json(payload)
        except ValidationError as exc:
            log.warning("Discarding unreadable cache record %s: %s", key, exc)
            return []

        items: list[T] = []
        for raw in envelope.items:
            try:
                items.append(codec.load(raw))
            except (ValidationError, ValueError) as exc:
                log.warning(
                    "Skipping unreadable %s item for %s: %s", collection.name, owner_key, exc
                )
        return items

    def save[T](self, owner_key: str, collection: CacheCollection[T], items: Sequence[T]) -> None:
        codec = cast(_Codec[T], _CODECS[collection.name])
        key = storage_key(owner_key, collection.name, self.compat_key)
        kept = [item for item in items if codec.keep(item)]
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(cache_records_table).where(cache_records_table.c.key == key))
                if kept or not codec.delete_when_empty:
                    payload = CachePayload(items=[codec.dump(item) for item in kept])
                    conn.execute(
                        insert(cache_records_table).values(
                            key=key,
                            owner_key=owner_key,
                            collection=collection.name,
                            payload=payload.model_dump_json(),
                            updated_at=self._clock(),
                        )
                    )
        except SQLAlchemyError as exc:
            log.warning("Could not write cache record %s: %s", key, exc)


if TYPE_CHECKING:
    from sqlalchemy import create_engine as _create_engine

    _cache_check: ReconciliationCache = SqlAlchemyReconciliationCache(_create_engine("sqlite://"))
