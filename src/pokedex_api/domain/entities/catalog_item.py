# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Catalog Item Entity

Purpose:
    Immutable domain representation of one creature record as returned by the
    upstream ``/pokemon/{id}`` endpoint, plus the small reference records the
    listing endpoints return (summaries, type members, type tags).

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .base import BaseEntity, capitalize_slug

PLACEHOLDER_IMAGE_URL: Final[str] = "/images/pokemon-placeholder.png"
DEFAULT_TYPE_COLOR: Final[str] = "#68D391"

TYPE_COLORS: Final[dict[str, str]] = {
    "normal": "#A8A878",
    "fire": "#F08030",
    "water": "#6890F0",
    "electric": "#F8D030",
    "grass": "#78C850",
    "ice": "#98D8D8",
    "fighting": "#C03028",
    "poison": "#A040A0",
    "ground": "#E0C068",
    "flying": "#A890F0",
    "psychic": "#F85888",
    "bug": "#A8B820",
    "rock": "#B8A038",
    "ghost": "#705898",
    "dragon": "#7038F8",
    "dark": "#705848",
    "steel": "#B8B8D0",
    "fairy": "#EE99AC",
}

DEFAULT_TYPE_CSS_CLASS: Final[str] = "bg-secondary"

TYPE_CSS_CLASSES: Final[dict[str, str]] = {
    "normal": "bg-secondary",
    "fire": "bg-danger",
    "water": "bg-primary",
    "electric": "bg-warning",
    "grass": "bg-success",
    "ice": "bg-info",
    "fighting": "bg-dark",
    "poison": "bg-purple",
    "ground": "bg-brown",
    "flying": "bg-light",
    "psychic": "bg-pink",
    "bug": "bg-green",
    "rock": "bg-gray",
    "ghost": "bg-indigo",
    "dragon": "bg-violet",
    "dark": "bg-dark",
    "steel": "bg-secondary",
    "fairy": "bg-pink",
}


def type_css_class(type_name: str) -> str:
    """Return the badge CSS class for a type name (case-insensitive)."""
    return TYPE_CSS_CLASSES.get(type_name.strip().lower(), DEFAULT_TYPE_CSS_CLASS)


@dataclass(frozen=True, slots=True)
class TypeSlot(BaseEntity):
    """Category tag attached to an item, ordered by ``slot``."""

    slot: int
    name: str


@dataclass(frozen=True, slots=True)
class AbilitySlot(BaseEntity):
    """Trait reference attached to an item."""

    slot: int
    name: str
    is_hidden: bool = False


@dataclass(frozen=True, slots=True)
class StatValue(BaseEntity):
    """Named numeric attribute (``hp``, ``attack`` ...)."""

    name: str
    base_stat: int
    effort: int = 0


@dataclass(frozen=True, slots=True)
class SpriteBundle(BaseEntity):
    """Image references for an item.

    Attributes:
        front_default: Primary sprite URL.
        front_shiny: Shiny-form sprite URL.
        back_default: Back sprite URL.
        back_shiny: Shiny back sprite URL.
        official_artwork: Higher-quality artwork URL.
        home_default: Alternate-form render URL.
    """

    front_default: str | None = None
    front_shiny: str | None = None
    back_default: str | None = None
    back_shiny: str | None = None
    official_artwork: str | None = None
    home_default: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogItem(BaseEntity):
    """Catalog item entity.

    Args:
        id: Stable positive identifier assigned upstream.
        name: Lowercase slug.
        height: Height in decimetres.
        weight: Weight in hectograms.
        base_experience: Base experience yield.
        types: Category tags ordered by slot.
        abilities: Trait references ordered by slot.
        stats: Named numeric attributes in upstream order.
        sprites: Image reference bundle.
        species_name: Name of the linked species record, when present.

    Raises:
        ValueError: If ``id`` is not positive or ``name`` is empty.
    """

    id: int
    name: str
    height: int = 0
    weight: int = 0
    base_experience: int = 0
    types: tuple[TypeSlot, ...] = field(default_factory=tuple)
    abilities: tuple[AbilitySlot, ...] = field(default_factory=tuple)
    stats: tuple[StatValue, ...] = field(default_factory=tuple)
    sprites: SpriteBundle = field(default_factory=SpriteBundle)
    species_name: str | None = None

    def __post_init__(self) -> None:
        if self.id < 1:
            raise ValueError("id must be a positive integer")
        if not self.name:
            raise ValueError("name must be non-empty")

    @property
    def display_name(self) -> str:
        return capitalize_slug(self.name)

    @property
    def image_url(self) -> str:
        """Best available image: official artwork, then front sprite, then placeholder."""
        return self.sprites.official_artwork or self.sprites.front_default or PLACEHOLDER_IMAGE_URL

    @property
    def type_names(self) -> list[str]:
        return [t.name for t in self.types]

    @property
    def primary_type_color(self) -> str:
        """Hex color of the first type tag (green when the item has none)."""
        if not self.types:
            return DEFAULT_TYPE_COLOR
        return TYPE_COLORS.get(self.types[0].name.lower(), DEFAULT_TYPE_COLOR)

    @property
    def total_stats(self) -> int:
        return sum(s.base_stat for s in self.stats)

    def has_type(self, type_name: str) -> bool:
        wanted = type_name.strip().lower()
        return any(t.name.lower() == wanted for t in self.types)

    def stat_value(self, stat_name: str) -> int:
        """Return the base value of ``stat_name`` (case-insensitive), or ``0``."""
        wanted = stat_name.lower()
        for stat in self.stats:
            if stat.name.lower() == wanted:
                return stat.base_stat
        return 0


@dataclass(frozen=True, slots=True)
class ItemReference(BaseEntity):
    """Name + numeric id pair parsed from an upstream resource link."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class CategoryTag(BaseEntity):
    """Entry of the upstream type list."""

    name: str
    url: str = ""
