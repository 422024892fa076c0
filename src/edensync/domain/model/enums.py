"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class QuantityClass(StrEnum):
    """Coarse harvest size; ``rank`` orders small < medium < large."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def rank(self) -> int:
        return list(QuantityClass).index(self)
