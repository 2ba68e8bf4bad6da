"""'Surprise me': weighted random pick among well-stocked recipes."""
from __future__ import annotations
import logging
import random
from typing import Iterable, List, Optional, Tuple

from dinner.domain.Pantry import Pantry
from dinner.domain.Recipe import Recipe
from dinner.logic.suggestions.coverage import EMPTY_EXCLUDED, meets_threshold, pantry_coverage
from dinner.utilities.config import COVERAGE_THRESHOLD

logger = logging.getLogger(__name__)

__all__ = ["eligible_recipes", "pick_recipe_weighted"]


def eligible_recipes(recipes: Iterable[Recipe], pantry: Pantry, *,
                     threshold: float = COVERAGE_THRESHOLD) -> List[Tuple[Recipe, float]]:
    """(recipe, weight) for recipes with at least one essential and coverage >= threshold."""
    out: List[Tuple[Recipe, float]] = []
    for recipe in recipes:
        if recipe.is_quick_note:
            continue
        cov = pantry_coverage(recipe, pantry)
        if not meets_threshold(cov, threshold=threshold, empty=EMPTY_EXCLUDED):
            continue
        out.append((recipe, cov.ratio(EMPTY_EXCLUDED)))
    return out


def pick_recipe_weighted(recipes: Iterable[Recipe], pantry: Pantry, rng: Optional[random.Random] = None, *,
                         threshold: float = COVERAGE_THRESHOLD) -> Optional[Recipe]:
    candidates = eligible_recipes(recipes, pantry, threshold=threshold)
    if not candidates:
        return None
    rng = rng or random.Random()
    total = sum(w for _, w in candidates)
    roll = rng.random() * total
    for recipe, weight in candidates:
        if roll < weight:
            logger.debug("Surprise pick: %s (weight %.2f of %.2f)", recipe.title, weight, total)
            return recipe
        roll -= weight
    return candidates[0][0]
