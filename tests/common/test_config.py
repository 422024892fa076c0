from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from edensync.config import (
    ConfigurationError,
    configure_logging,
    get_cache_uri,
    get_indexer_config,
    get_reconciliation_settings,
    get_storage_config,
)
from edensync.config.indexer import DEFAULT_INDEXER_URL, INDEXER_TOKEN_HEADER

_RECONCILIATION_VARS = (
    "EDEN_POLL_INTERVAL_SECONDS",
    "EDEN_MAX_POLL_ATTEMPTS",
    "EDEN_PENDING_TTL_SECONDS",
    "EDEN_CACHE_COMPAT_KEY",
)


def test_reconciliation_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _RECONCILIATION_VARS:
        monkeypatch.delenv(name, raising=False)

    settings = get_reconciliation_settings()

    assert settings.poll_interval_seconds == 5.0
    assert settings.max_poll_attempts == 60
    assert settings.pending_ttl == timedelta(minutes=5)
    assert settings.cache_compat_key == "v3"


def test_reconciliation_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_POLL_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("EDEN_MAX_POLL_ATTEMPTS", "10")
    monkeypatch.setenv("EDEN_PENDING_TTL_SECONDS", "30")
    monkeypatch.setenv("EDEN_CACHE_COMPAT_KEY", "v4")

    settings = get_reconciliation_settings()

    assert settings.poll_interval_seconds == 2.5
    assert settings.max_poll_attempts == 10
    assert settings.pending_ttl == timedelta(seconds=30)
    assert settings.cache_compat_key == "v4"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("EDEN_POLL_INTERVAL_SECONDS", "soon"),
        ("EDEN_POLL_INTERVAL_SECONDS", "0"),
        ("EDEN_MAX_POLL_ATTEMPTS", "0"),
        ("EDEN_PENDING_TTL_SECONDS", "-1"),
    ],
)
def test_invalid_reconciliation_settings_raise(
    monkeypatch: pytest.MonkeyPatch,
    name: str,
    value: str,
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_reconciliation_settings()


def test_indexer_config_defaults_and_token_header(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EDEN_INDEXER_URL", raising=False)
    monkeypatch.setenv("EDEN_INDEXER_TOKEN", "secret")

    config = get_indexer_config()

    assert config.base_url == DEFAULT_INDEXER_URL
    assert config.resilience.base_url == DEFAULT_INDEXER_URL
    assert config.resilience.default_headers == {INDEXER_TOKEN_HEADER: "secret"}
    assert config.asset_batch_size == 5


def test_indexer_url_override_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_INDEXER_URL", "http://localhost:8980/")
    monkeypatch.delenv("EDEN_INDEXER_TOKEN", raising=False)

    config = get_indexer_config()

    assert config.base_url == "http://localhost:8980"
    assert config.resilience.default_headers is None


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EDEN_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("EDEN_CACHE_URI", raising=False)

    storage = get_storage_config()

    assert storage.data_dir == tmp_path.resolve()
    expected = f"sqlite+pysqlite:///{tmp_path.resolve()}/edensync-cache.db"
    assert get_cache_uri(storage=storage) == expected


def test_cache_uri_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_CACHE_URI", "sqlite+pysqlite:///:memory:")

    assert get_cache_uri() == "sqlite+pysqlite:///:memory:"


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("EDEN_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    storage = get_storage_config()

    assert storage.data_dir == Path(tmp_path / "edensync").resolve()


def test_configuration_error_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_POLL_INTERVAL_SECONDS", "0")

    with pytest.raises(ConfigurationError) as exc:
        get_reconciliation_settings()

    assert exc.value.variable == "EDEN_POLL_INTERVAL_SECONDS"
    assert "must be > 0.0" in str(exc.value)


def test_unparseable_cache_uri_override_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDEN_CACHE_URI", "not a database url")

    with pytest.raises(ConfigurationError) as exc:
        get_cache_uri()

    assert exc.value.variable == "EDEN_CACHE_URI"


def test_debug_logging_lets_transport_loggers_through(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging, "basicConfig", lambda **_: None)

    configure_logging(level=logging.DEBUG, force=True)
    assert logging.getLogger("httpx").level == logging.DEBUG

    configure_logging(level=logging.INFO, force=True)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
