"""SQLAlchemy adapter package for the reconciliation cache."""

from __future__ import annotations

from .cache import SqlAlchemyReconciliationCache, storage_key
from .mappings import cache_records_table, create_all_tables, create_cache_engine

__all__ = [
    "SqlAlchemyReconciliationCache",
    "cache_records_table",
    "create_all_tables",
    "create_cache_engine",
    "storage_key",
]
