# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Mixin for immutable domain entities. Provides frozen dataclass semantics
    and a small validation hook for invariants.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BaseEntity:
    """Base mixin for immutable catalog records.

    Concrete entities subclass this mixin, declare their own fields and may
    override :meth:`__post_init__` to enforce invariants.
    """

    def __post_init__(self) -> None:  # noqa: D401
        """Hook for subclasses to extend with invariant checks."""
        return


def capitalize_slug(value: str) -> str:
    """Return ``value`` with its first character upper-cased (``"mr-mime"`` -> ``"Mr-mime"``)."""
    return value[:1].upper() + value[1:] if value else value
