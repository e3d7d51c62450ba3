# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Species Entity

Purpose:
    Immutable secondary record from ``/pokemon-species/{id}``. Carries the
    localized flavor text and category labels, with accessors that pick a
    preferred language and fall back to a second one.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final

from .base import BaseEntity

NO_DESCRIPTION: Final[str] = "No description available"
UNKNOWN_CATEGORY: Final[str] = "Unknown"

_GENERATION_NUMERALS: Final[dict[str, str]] = {
    "generation-i": "I",
    "generation-ii": "II",
    "generation-iii": "III",
    "generation-iv": "IV",
    "generation-v": "V",
    "generation-vi": "VI",
    "generation-vii": "VII",
    "generation-viii": "VIII",
    "generation-ix": "IX",
}


@dataclass(frozen=True, slots=True)
class LocalizedText(BaseEntity):
    """A piece of text tagged with its language code (``en``, ``es`` ...)."""

    language: str
    text: str


def _pick(entries: Sequence[LocalizedText], preferred: str, fallback: str) -> LocalizedText | None:
    for language in (preferred, fallback):
        for entry in entries:
            if entry.language == language:
                return entry
    return None


@dataclass(frozen=True, slots=True)
class SpeciesInfo(BaseEntity):
    """Species entity.

    Args:
        id: Species identifier.
        name: Lowercase slug.
        color: Color tag.
        habitat: Habitat tag; ``None`` when upstream has none.
        generation: Generation tag (``generation-i`` ...).
        is_legendary: Rare tier 1 flag.
        is_mythical: Rare tier 2 flag.
        capture_rate: Capture difficulty.
        base_happiness: Base friendliness.
        growth_rate: Growth curve tag.
        flavor_texts: Description text per language, upstream order.
        genera: Category label per language, upstream order.
    """

    id: int
    name: str
    color: str = ""
    habitat: str | None = None
    generation: str = ""
    is_legendary: bool = False
    is_mythical: bool = False
    capture_rate: int = 0
    base_happiness: int = 0
    growth_rate: str = ""
    flavor_texts: tuple[LocalizedText, ...] = field(default_factory=tuple)
    genera: tuple[LocalizedText, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.id < 1:
            raise ValueError("id must be a positive integer")

    def description(self, preferred: str = "es", fallback: str = "en") -> str:
        """Return the flavor text in ``preferred`` (or ``fallback``) language.

        Line feeds and form feeds embedded by upstream are replaced with spaces.
        """
        entry = _pick(self.flavor_texts, preferred, fallback)
        if entry is None:
            return NO_DESCRIPTION
        return entry.text.replace("\n", " ").replace("\f", " ").strip()

    def category(self, preferred: str = "es", fallback: str = "en") -> str:
        entry = _pick(self.genera, preferred, fallback)
        return entry.text if entry is not None else UNKNOWN_CATEGORY

    @property
    def generation_numeral(self) -> str:
        """Roman numeral for the generation tag (``generation-iv`` -> ``IV``)."""
        if self.generation in _GENERATION_NUMERALS:
            return _GENERATION_NUMERALS[self.generation]
        return self.generation.replace("generation-", "").upper()
