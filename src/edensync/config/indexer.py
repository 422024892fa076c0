"""Ledger indexer configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_INDEXER_URL = "https://testnet-idx.algonode.cloud"
INDEXER_TIMEOUT_SECONDS = 10.0
INDEXER_TOKEN_HEADER = "X-Indexer-API-Token"


@dataclass(frozen=True, slots=True)
class IndexerConfig:
    """Holds indexer endpoint configuration values."""

    base_url: str
    resilience: ResilienceConfig
    asset_batch_size: int = 5


def get_indexer_config(*, resilience: ResilienceConfig | None = None) -> IndexerConfig:
    base_url = (optional_env_var("EDEN_INDEXER_URL") or DEFAULT_INDEXER_URL).rstrip("/")
    token = optional_env_var("EDEN_INDEXER_TOKEN")
    headers = {INDEXER_TOKEN_HEADER: token} if token else None
    return IndexerConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="indexer",
            base_url=base_url,
            timeout_seconds=INDEXER_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=headers,
        ),
    )
