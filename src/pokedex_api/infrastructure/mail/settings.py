# src/pokedex_api/infrastructure/mail/settings.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""SMTP delivery settings (pydantic-settings)."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmtpSettings(BaseSettings):
    """SMTP settings read from ``SMTP_*`` environment variables.

    Delivery is considered configured only when server, a positive port,
    username, password and sender address are all present.
    """

    server: str = Field("", description="SMTP host name.")
    port: int = Field(587, ge=0, description="SMTP port; 0 disables delivery.")
    username: str = Field("", description="SMTP login user.")
    password: SecretStr | None = Field(None, description="SMTP login password.")
    from_email: str = Field("", description="Sender address.")
    from_name: str = Field("Pokedex", description="Sender display name.")
    use_tls: bool = Field(True, description="Issue STARTTLS before login.")
    timeout_s: float = Field(10.0, gt=0, description="Socket timeout in seconds.")

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        env_file=".env",
        extra="ignore",
    )
