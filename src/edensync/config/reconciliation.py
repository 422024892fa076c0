"""Timing and cache defaults for the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .env import env_float, env_int, optional_env_var

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_MAX_POLL_ATTEMPTS = 60
DEFAULT_PENDING_TTL = timedelta(minutes=5)
DEFAULT_CACHE_COMPAT_KEY = "v3"


@dataclass(frozen=True, slots=True)
class ReconciliationSettings:
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    pending_ttl: timedelta = field(default=DEFAULT_PENDING_TTL)
    cache_compat_key: str = DEFAULT_CACHE_COMPAT_KEY


def get_reconciliation_settings() -> ReconciliationSettings:
    ttl_seconds = env_float(
        "EDEN_PENDING_TTL_SECONDS",
        DEFAULT_PENDING_TTL.total_seconds(),
    )
    return ReconciliationSettings(
        poll_interval_seconds=env_float(
            "EDEN_POLL_INTERVAL_SECONDS",
            DEFAULT_POLL_INTERVAL_SECONDS,
            exclusive=True,
        ),
        max_poll_attempts=env_int("EDEN_MAX_POLL_ATTEMPTS", DEFAULT_MAX_POLL_ATTEMPTS, minimum=1),
        pending_ttl=timedelta(seconds=ttl_seconds),
        cache_compat_key=optional_env_var("EDEN_CACHE_COMPAT_KEY") or DEFAULT_CACHE_COMPAT_KEY,
    )
