# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Listing Entities

Purpose:
    Value objects shared between the gateway and the query service for
    paginated listings: the raw upstream page envelope, the listing result
    handed to request handlers, and the type option shown in filters.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .base import BaseEntity
from .catalog_item import CatalogItem, ItemReference


@dataclass(frozen=True, slots=True)
class CatalogPage(BaseEntity):
    """One upstream page of item summaries.

    Attributes:
        items: Summaries on this page (name + id).
        total_count: Total number of items upstream.
        has_next: Upstream reported a next page.
        has_previous: Upstream reported a previous page.
    """

    items: tuple[ItemReference, ...]
    total_count: int
    has_next: bool
    has_previous: bool


@dataclass(frozen=True, slots=True)
class ListResult(BaseEntity):
    """Answer of a listing query.

    ``error_message`` is set (and ``items`` typically empty) when the upstream
    could not be reached; callers render it instead of raising.
    """

    items: tuple[CatalogItem, ...] = field(default_factory=tuple)
    page: int = 1
    page_size: int = 20
    total_count: int = 0
    has_next: bool = False
    has_previous: bool = False
    error_message: str | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.page_size) if self.total_count else 0


@dataclass(frozen=True, slots=True)
class TypeOption(BaseEntity):
    """Type filter option with presentation hints."""

    name: str
    display_name: str
    color_class: str
