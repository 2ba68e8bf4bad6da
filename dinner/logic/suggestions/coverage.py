"""Pantry coverage of a recipe's essential ingredients.

A recipe with no essential ingredients has no coverage signal. The two
consumers read that case differently, so the caller picks the policy:

    EMPTY_AS_COVERED  ratio 1.0  (weekday suggestions)
    EMPTY_EXCLUDED    no ratio   (surprise picker skips the recipe)
"""
from __future__ import annotations
from typing import Optional

from dinner.domain.Pantry import Pantry
from dinner.domain.Recipe import Recipe
from dinner.utilities.config import COVERAGE_THRESHOLD

EMPTY_AS_COVERED: Optional[float] = 1.0
EMPTY_EXCLUDED: Optional[float] = None

__all__ = ["Coverage", "pantry_coverage", "meets_threshold", "EMPTY_AS_COVERED", "EMPTY_EXCLUDED"]


class Coverage:
    def __init__(self, ok: int = 0, total: int = 0):
        self.ok = ok
        self.total = total

    def ratio(self, empty: Optional[float] = EMPTY_AS_COVERED) -> Optional[float]:
        if not self.total:
            return empty
        return self.ok / self.total

    def __eq__(self, other) -> bool:
        if not isinstance(other, Coverage):
            return NotImplemented
        return (self.ok, self.total) == (other.ok, other.total)

    def __str__(self) -> str:
        return f"{self.ok}/{self.total}"

    __repr__ = __str__

    def to_dict(self):
        return {"ok": self.ok, "total": self.total, "ratio": self.ratio()}


def pantry_coverage(recipe: Recipe, pantry: Pantry) -> Coverage:
    """Essentials whose staple is Full or Half, out of all essentials. Untracked names count as missing."""
    essentials = recipe.essentials()
    ok = sum(1 for ing in essentials if pantry.is_stocked(ing.name))
    return Coverage(ok, len(essentials))


def meets_threshold(coverage: Coverage, *, threshold: float = COVERAGE_THRESHOLD,
                    empty: Optional[float] = EMPTY_AS_COVERED) -> bool:
    ratio = coverage.ratio(empty)
    return ratio is not None and ratio >= threshold
