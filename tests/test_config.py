"""Unit tests for core/config.py.

Covers the SECRET_KEY policy:
- production mode without a key refuses to start
- DEBUG mode generates a random key
- keys shorter than 32 characters are rejected in either mode
- authorization switches default to strict
"""

import pytest

from core.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("SECRET_KEY", "DEBUG", "ENFORCE_TOKEN_ROLE", "SCOPE_ASSIGNMENTS_TO_ADMIN", "ENFORCE_STATUS_TRANSITIONS"):
        monkeypatch.delenv(var, raising=False)
    # Keep a developer's local .env out of the picture.
    monkeypatch.setitem(Settings.model_config, "env_file", None)


def test_missing_key_in_production_raises() -> None:
    with pytest.raises(ValueError, match="SECRET_KEY is required"):
        Settings(debug=False)


def test_debug_generates_key() -> None:
    settings = Settings(debug=True)
    assert len(settings.secret_key) >= 32


def test_debug_keys_are_random() -> None:
    assert Settings(debug=True).secret_key != Settings(debug=True).secret_key


@pytest.mark.parametrize("debug", [True, False])
def test_short_key_rejected(debug) -> None:
    with pytest.raises(ValueError, match="at least 32"):
        Settings(secret_key="too-short", debug=debug)


def test_key_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SECRET_KEY", "e" * 40)
    assert Settings().secret_key == "e" * 40


def test_policy_defaults_are_strict() -> None:
    settings = Settings(secret_key="s" * 32)
    assert settings.enforce_token_role
    assert settings.scope_assignments_to_admin
    assert settings.enforce_status_transitions


def test_policy_switches_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("ENFORCE_STATUS_TRANSITIONS", "false")
    settings = Settings(secret_key="s" * 32)
    assert settings.enforce_status_transitions is False
