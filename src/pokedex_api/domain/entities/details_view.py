# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Details View

Purpose:
    Item detail enriched with optional species data. The item is mandatory;
    ``species`` is ``None`` whenever the secondary fetch missed or failed, and
    every derived accessor has a default for that case.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .base import BaseEntity
from .catalog_item import CatalogItem
from .species import UNKNOWN_CATEGORY, SpeciesInfo

SPECIES_UNAVAILABLE: Final[str] = "Species information not available"


@dataclass(frozen=True, slots=True)
class DetailsView(BaseEntity):
    """Item detail plus best-effort species enrichment."""

    item: CatalogItem
    species: SpeciesInfo | None = None
    preferred_language: str = "es"
    fallback_language: str = "en"

    @property
    def formatted_height(self) -> str:
        """Height in metres (upstream reports decimetres)."""
        return f"{self.item.height / 10:.1f} m"

    @property
    def formatted_weight(self) -> str:
        """Weight in kilograms (upstream reports hectograms)."""
        return f"{self.item.weight / 10:.1f} kg"

    @property
    def is_special(self) -> bool:
        return self.species is not None and (self.species.is_legendary or self.species.is_mythical)

    @property
    def special_label(self) -> str | None:
        if self.species is None:
            return None
        if self.species.is_legendary:
            return "Legendary"
        if self.species.is_mythical:
            return "Mythical"
        return None

    @property
    def description(self) -> str:
        if self.species is None:
            return SPECIES_UNAVAILABLE
        return self.species.description(self.preferred_language, self.fallback_language)

    @property
    def category(self) -> str:
        if self.species is None:
            return UNKNOWN_CATEGORY
        return self.species.category(self.preferred_language, self.fallback_language)

    @property
    def generation(self) -> str:
        return self.species.generation_numeral if self.species is not None else "?"

    @property
    def habitat(self) -> str:
        if self.species is None or not self.species.habitat:
            return UNKNOWN_CATEGORY
        return self.species.habitat
