# src/pokedex_api/__init__.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Pokedex API: cached, read-only facade over the public PokeAPI catalog."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
