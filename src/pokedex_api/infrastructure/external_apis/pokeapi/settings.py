# src/pokedex_api/infrastructure/external_apis/pokeapi/settings.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Pydantic settings for the PokeAPI transport client."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PokeApiSettings(BaseSettings):
    """Configuration for the PokeAPI v2 client.

    Environment variables (with ``model_config.env_prefix``):

    * ``POKEAPI_BASE_URL``
    * ``POKEAPI_TIMEOUT_S``
    * ``POKEAPI_MAX_RETRIES``
    * ``POKEAPI_TYPE_LIST_LIMIT``
    * ``POKEAPI_NAME_INDEX_LIMIT``
    * ``POKEAPI_BREAKER_FAILURE_THRESHOLD``
    * ``POKEAPI_BREAKER_RECOVERY_S``
    """

    base_url: str = Field(
        "https://pokeapi.co/api/v2/",
        description="Base URL for the PokeAPI v2 REST API.",
    )
    timeout_s: float = Field(
        30.0,
        gt=0,
        description="Per-request timeout in seconds.",
    )
    max_retries: int = Field(
        2,
        ge=0,
        le=10,
        description="Retry attempts for unavailable/timeout failures.",
    )
    type_list_limit: int = Field(
        20,
        ge=1,
        description="`limit` used when listing types.",
    )
    name_index_limit: int = Field(
        1000,
        ge=1,
        description="`limit` used when loading the name index for prefix search.",
    )
    breaker_failure_threshold: int = Field(
        5,
        ge=1,
        description="Consecutive failures before the circuit opens.",
    )
    breaker_recovery_s: float = Field(
        30.0,
        gt=0,
        description="Seconds the circuit stays open before a probe call.",
    )

    model_config = SettingsConfigDict(
        env_prefix="POKEAPI_",
        env_file=".env",
        extra="ignore",
    )
