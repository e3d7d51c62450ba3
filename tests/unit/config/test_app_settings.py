from __future__ import annotations

import pytest
from pydantic import ValidationError

from pokedex_api.application.caching.orchestrator import CacheKind, CachePolicy
from pokedex_api.config.settings import Environment, Settings
from pokedex_api.infrastructure.external_apis.pokeapi.settings import PokeApiSettings
from pokedex_api.infrastructure.mail.settings import SmtpSettings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    s = Settings()
    assert s.environment is Environment.TEST
    assert s.cache_ttl_types_s == 21600
    assert s.cache_ttl_item_s == 1800
    assert s.cache_ttl_species_s == 3600
    assert s.cache_ttl_search_s == 900
    assert s.cache_sliding_window_s == 300
    assert s.catalog_page_size == 20
    assert s.catalog_category_member_cap == 200
    assert s.catalog_preferred_language == "es"
    assert s.cors_allow_origins == []


def test_env_overrides_feed_cache_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_TTL_ITEM_S", "60")
    monkeypatch.setenv("CACHE_INVALIDATE_MAX_ID", "25")
    policy = CachePolicy.from_settings(Settings())
    assert policy.ttl_for(CacheKind.ITEM) == 60
    assert policy.invalidate_max_id == 25


def test_cors_list_is_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example ,")
    assert Settings().cors_allow_origins == ["https://a.example", "https://b.example"]


def test_wildcard_cors_rejected_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    with pytest.raises(ValidationError):
        Settings()


def test_invalid_ttl_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_TTL_SEARCH_S", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_pokeapi_settings_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POKEAPI_TIMEOUT_S", "5")
    monkeypatch.setenv("POKEAPI_MAX_RETRIES", "0")
    s = PokeApiSettings()
    assert s.timeout_s == 5.0
    assert s.max_retries == 0
    assert s.base_url == "https://pokeapi.co/api/v2/"


def test_smtp_settings_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMTP_PASSWORD", "hunter2")
    s = SmtpSettings()
    assert s.password is not None
    assert s.password.get_secret_value() == "hunter2"
    assert "hunter2" not in repr(s)
