"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .indexer import IndexerConfig, get_indexer_config
from .logging import configure_logging
from .reconciliation import ReconciliationSettings, get_reconciliation_settings
from .storage import StorageConfig, get_cache_uri, get_storage_config

__all__ = [
    "ConfigurationError",
    "IndexerConfig",
    "RateLimit",
    "ReconciliationSettings",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_cache_uri",
    "get_indexer_config",
    "get_reconciliation_settings",
    "get_storage_config",
]
