# src/pokedex_api/application/interfaces/email_sender.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: email delivery of catalog summaries.

Implementations never raise; delivery problems are logged and reported
through the boolean / count return values.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pokedex_api.domain.entities.catalog_item import CatalogItem


class EmailSenderPort(Protocol):
    """Send formatted item summaries by email."""

    def is_configured(self) -> bool:
        """Return True when delivery settings are complete."""
        ...

    async def send(self, item: CatalogItem, recipient: str, recipient_name: str = "") -> bool:
        """Send one item summary; return whether delivery succeeded."""
        ...

    async def send_bulk(
        self,
        items: Sequence[CatalogItem],
        recipient: str,
        recipient_name: str = "",
    ) -> int:
        """Send one message listing ``items``; return the number of messages delivered."""
        ...
