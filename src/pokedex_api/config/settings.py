# src/pokedex_api/config/settings.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Pokedex Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated application configuration for the Pokedex API. Provider
    specific settings (PokeAPI transport, SMTP delivery) live beside their
    infrastructure modules and carry their own env prefixes; this module owns
    the service-wide knobs: environment, CORS, cache TTL bands and the catalog
    fan-out limits.

Design:
    - Pydantic v2 BaseSettings with explicit `validation_alias` env names.
    - TTL defaults mirror the cache policy table (types 6h, item 30m,
      species 1h, search 15m, sliding 5m).
    - Singleton accessor `get_settings()` with LRU cache.
    - Safe, structured logging (no secrets).
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration for the Pokedex API.

    Adapters and Infrastructure may read environment variables; other layers
    receive this object (or plain values taken from it) through DI.
    """

    # ---------------------------
    # Core environment
    # ---------------------------
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )

    service_name: str = Field(
        default="pokedex-api",
        description="Logical service name for logging.",
        validation_alias="SERVICE_NAME",
    )
    service_version: str | None = Field(
        default=None,
        description="Service version used for logging and the OpenAPI document.",
        validation_alias="SERVICE_VERSION",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level for the JSON logger.",
        validation_alias="LOG_LEVEL",
    )

    # Raw env for CORS; the parsed list is computed in a model validator.
    cors_allow_origins_raw: str | None = Field(
        default=None,
        description="Raw env for allowed CORS origins (comma-separated).",
        validation_alias="ALLOWED_ORIGINS",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins. Derived from ALLOWED_ORIGINS.",
    )

    # ---------------------------
    # Cache policy (seconds)
    # ---------------------------
    cache_ttl_types_s: int = Field(
        default=6 * 60 * 60,
        ge=1,
        description="Absolute TTL for the type list and type membership lists.",
        validation_alias="CACHE_TTL_TYPES_S",
    )
    cache_ttl_item_s: int = Field(
        default=30 * 60,
        ge=1,
        description="Absolute TTL for item details.",
        validation_alias="CACHE_TTL_ITEM_S",
    )
    cache_ttl_species_s: int = Field(
        default=60 * 60,
        ge=1,
        description="Absolute TTL for species details.",
        validation_alias="CACHE_TTL_SPECIES_S",
    )
    cache_ttl_search_s: int = Field(
        default=15 * 60,
        ge=1,
        description="Absolute TTL for prefix search results.",
        validation_alias="CACHE_TTL_SEARCH_S",
    )
    cache_sliding_window_s: int = Field(
        default=5 * 60,
        ge=0,
        description="Sliding window recorded on every entry (never extends validity).",
        validation_alias="CACHE_SLIDING_WINDOW_S",
    )
    cache_invalidate_max_id: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Upper bound of the id range swept by a full cache clear.",
        validation_alias="CACHE_INVALIDATE_MAX_ID",
    )
    cache_sweep_interval_s: int = Field(
        default=60,
        ge=0,
        description="Minimum seconds between expired-entry sweeps run on cache writes.",
        validation_alias="CACHE_SWEEP_INTERVAL_S",
    )

    # ---------------------------
    # Catalog query limits
    # ---------------------------
    catalog_page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Default listing page size.",
        validation_alias="CATALOG_PAGE_SIZE",
    )
    catalog_category_member_cap: int = Field(
        default=200,
        ge=1,
        le=2000,
        description="Maximum number of type members fetched for a type-filtered listing.",
        validation_alias="CATALOG_CATEGORY_MEMBER_CAP",
    )
    catalog_fanout_concurrency: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Maximum concurrent upstream detail fetches within one request.",
        validation_alias="CATALOG_FANOUT_CONCURRENCY",
    )
    catalog_search_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of names returned by the prefix search.",
        validation_alias="CATALOG_SEARCH_LIMIT",
    )
    catalog_preferred_language: str = Field(
        default="es",
        description="Preferred language for species descriptions and categories.",
        validation_alias="CATALOG_PREFERRED_LANGUAGE",
    )
    catalog_fallback_language: str = Field(
        default="en",
        description="Fallback language when the preferred one is missing.",
        validation_alias="CATALOG_FALLBACK_LANGUAGE",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def _compute_cors(self) -> Settings:
        """Compute the CORS list from the raw env value.

        Returns:
            Settings: The validated and possibly mutated settings instance.

        Raises:
            ValueError: If a wildcard origin is configured outside development/test.
        """
        raw = (self.cors_allow_origins_raw or "").strip()
        entries = [e.strip() for e in raw.split(",") if e.strip()]
        if any(e == "*" for e in entries) and self.environment not in (
            Environment.DEVELOPMENT,
            Environment.TEST,
        ):
            raise ValueError(
                "'*' CORS origin is only allowed in development/test environments.",
            )
        self.cors_allow_origins = entries
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated application settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "environment": settings.environment.value,
                "cors_count": len(settings.cors_allow_origins),
                "cache_ttl": {
                    "types_s": settings.cache_ttl_types_s,
                    "item_s": settings.cache_ttl_item_s,
                    "species_s": settings.cache_ttl_species_s,
                    "search_s": settings.cache_ttl_search_s,
                    "sliding_s": settings.cache_sliding_window_s,
                },
                "catalog": {
                    "member_cap": settings.catalog_category_member_cap,
                    "fanout_concurrency": settings.catalog_fanout_concurrency,
                },
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
