"""Frequency ranking: score = recipes containing the staple x meals that used it.

Full recomputation every run; call it after anything that changes the recipe
catalog or the meal history.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, Mapping, Sequence

from dinner.domain.Outcome import Outcome
from dinner.domain.Pantry import PantryStaple
from dinner.domain.Recipe import Recipe
from dinner.events.event_helpers import publish_ranks_recalculated
from dinner.infra.Meal_Repository import meal_recipe_ids
from dinner.infra.Pantry_Repository import reading_from_staples, update_staple
from dinner.infra.Recipe_Repository import recipe_index
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.logic.pantry.depletion import meal_count_for_ingredient

logger = logging.getLogger(__name__)

__all__ = ["frequency_score", "compute_frequency_ranks", "recalculate_frequency_ranks"]


def frequency_score(recipes_containing: int, meals_containing: int) -> int:
    return recipes_containing * meals_containing


def compute_frequency_ranks(staples: Iterable[PantryStaple], recipes: Mapping[str, Recipe],
                            meal_recipe_ids: Sequence[str]) -> Dict[str, int]:
    """staple id -> score. Staples with a blank name are skipped."""
    ranks: Dict[str, int] = {}
    for staple in staples:
        if not staple.key:
            continue
        in_recipes = sum(1 for r in recipes.values() if r.contains(staple.key))
        in_meals = meal_count_for_ingredient(staple.key, meal_recipe_ids, recipes)
        ranks[staple.id] = frequency_score(in_recipes, in_meals)
    return ranks


def recalculate_frequency_ranks(store: JsonStore) -> Outcome:
    """Recompute and persist frequency_rank for every staple. Value: {staple id: rank}."""
    try:
        pantry = reading_from_staples(store)
        if not len(pantry):
            return Outcome.success({})
        ranks = compute_frequency_ranks(pantry.get_items(), recipe_index(store), meal_recipe_ids(store))
        updated = 0
        for staple in pantry.get_items():
            rank = ranks.get(staple.id)
            if rank is None or rank == staple.frequency_rank:
                continue
            update_staple(store, staple.id, {"frequency_rank": rank})
            updated += 1
    except DataAccessError as e:
        logger.error("Frequency recalculation failed: %s", e)
        return Outcome.failure(e.message)
    logger.debug("Frequency ranks recalculated: %d of %d changed", updated, len(ranks))
    publish_ranks_recalculated(updated, len(ranks))
    return Outcome.success(ranks)
