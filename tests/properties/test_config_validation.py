"""Property-based tests for configuration validation.

**Feature: wallet-ledger-core, Property 9: Configuration Validation**
"""

import pytest
from hypothesis import given, settings, strategies as st
from pydantic import ValidationError

from walletcore.core.config import Settings, get_settings, reset_settings


def make_valid_config() -> dict:
    return {
        "SECRET_KEY": "test-secret-key",
        "STORE_BACKEND": "memory",
    }


def test_missing_secret_key_raises_validation_error(monkeypatch) -> None:
    """A deployment without SECRET_KEY SHALL fail to start."""
    monkeypatch.delenv("SECRET_KEY", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@settings(max_examples=50)
@given(secret=st.text(max_size=7))
def test_short_secret_key_is_rejected(secret: str) -> None:
    """
    **Feature: wallet-ledger-core, Property 9: Configuration Validation**

    *For any* SECRET_KEY shorter than eight characters, loading the
    Settings SHALL raise a ValidationError.
    """
    config = make_valid_config()
    config["SECRET_KEY"] = secret

    with pytest.raises(ValidationError):
        Settings(_env_file=None, **config)


@settings(max_examples=50)
@given(backend=st.text(min_size=1, max_size=10).filter(lambda b: b not in {"memory", "json", "sql"}))
def test_unknown_store_backend_is_rejected(backend: str) -> None:
    """*For any* unknown STORE_BACKEND value, loading SHALL fail."""
    config = make_valid_config()
    config["STORE_BACKEND"] = backend

    with pytest.raises(ValidationError):
        Settings(_env_file=None, **config)


@settings(max_examples=50)
@given(retries=st.integers(max_value=0))
def test_commit_retries_must_be_positive(retries: int) -> None:
    """*For any* COMMIT_MAX_RETRIES below one, loading SHALL fail."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, COMMIT_MAX_RETRIES=retries, **make_valid_config())


@settings(max_examples=50)
@given(
    port=st.integers(min_value=1, max_value=65535),
    retries=st.integers(min_value=1, max_value=50),
)
def test_valid_values_are_loaded(port: int, retries: int) -> None:
    """*For any* valid port and retry count, the values SHALL round-trip."""
    loaded = Settings(
        _env_file=None,
        REDIS_PORT=port,
        COMMIT_MAX_RETRIES=retries,
        **make_valid_config(),
    )

    assert loaded.REDIS_PORT == port
    assert loaded.COMMIT_MAX_RETRIES == retries
    assert loaded.celery_broker_url.endswith(f":{port}/0")


def test_environment_values_are_read(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_CURRENCY", "USD")
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("COMMIT_MAX_RETRIES", "9")

    loaded = Settings(_env_file=None)

    assert loaded.DEFAULT_CURRENCY == "USD"
    assert loaded.STORE_BACKEND == "sql"
    assert loaded.COMMIT_MAX_RETRIES == 9


def test_settings_are_cached_until_reset(monkeypatch) -> None:
    """get_settings() keeps its first read; reset_settings() forces a fresh one."""
    reset_settings()
    try:
        monkeypatch.setenv("DEFAULT_CURRENCY", "USD")
        first = get_settings()
        monkeypatch.setenv("DEFAULT_CURRENCY", "EUR")

        assert get_settings() is first
        assert get_settings().DEFAULT_CURRENCY == "USD"

        reset_settings()

        assert get_settings().DEFAULT_CURRENCY == "EUR"
    finally:
        reset_settings()
