"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_float(
    name: str,
    default: float,
    *,
    minimum: float = 0.0,
    exclusive: bool = False,
) -> float:
    """Read a float, rejecting values below ``minimum`` (or equal to it when ``exclusive``)."""

    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(name, f"must be a number, got {raw!r}") from exc
    if exclusive and value <= minimum:
        raise ConfigurationError(name, f"must be > {minimum}, got {value}")
    if value < minimum:
        raise ConfigurationError(name, f"must be >= {minimum}, got {value}")
    return value


def env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(name, f"must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigurationError(name, f"must be >= {minimum}, got {value}")
    return value
