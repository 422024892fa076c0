"""SQLAlchemy Core metadata for the reconciliation cache."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    create_engine,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

cache_records_table = Table(
    "cache_records",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("owner_key", String(128), nullable=False),
    Column("collection", String(32), nullable=False),
    Column("payload", Text, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index(None, "owner_key"),
)


def create_all_tables(engine: Engine) -> None:
    """Create the cache tables if they do not exist yet."""

    log.debug("Creating cache tables")
    metadata.create_all(engine)


def create_cache_engine(database_uri: str) -> Engine:
    engine = create_engine(database_uri, future=True)
    create_all_tables(engine)
    return engine


__all__ = [
    "UTCDateTime",
    "cache_records_table",
    "create_all_tables",
    "create_cache_engine",
    "metadata",
]
