"""Depletion engine: derive staple status from how often its ingredient was eaten.

The model is a discrete step function over the lifetime meal count of an
ingredient (number of meal_history rows whose recipe contains it):

    count >= LOW_MEAL_COUNT  -> Low
    count >= HALF_MEAL_COUNT -> Half
    otherwise                -> status left as is

The result is never less depleted than the current status, so a Low or Out
staple stays put when the count implies Half. Out is never set here (that is a
manual status, see logic.pantry.stock.set_staple_status).
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from dinner.domain.Ingredient import normalize_name
from dinner.domain.MealEntry import parse_timestamp
from dinner.domain.Outcome import Outcome
from dinner.domain.Recipe import Recipe
from dinner.infra.Pantry_Repository import reading_from_staples, update_staple
from dinner.infra.Recipe_Repository import get_recipe, recipe_index
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.utilities.config import DEPLETION_WINDOW_DAYS, HALF_MEAL_COUNT, LOW_MEAL_COUNT
from dinner.utilities.constants import PANTRY_STATUSES, STATUS_HALF, STATUS_LOW

logger = logging.getLogger(__name__)

__all__ = ["status_from_meal_count", "meal_count_for_ingredient", "run_depletion_for_recipe", "depletion_counts"]


def status_from_meal_count(meal_count: int, current_status: str, *,
                           half_at: int = HALF_MEAL_COUNT, low_at: int = LOW_MEAL_COUNT) -> str:
    if meal_count >= low_at:
        implied = STATUS_LOW
    elif meal_count >= half_at:
        implied = STATUS_HALF
    else:
        return current_status
    if _depletion_rank(current_status) > _depletion_rank(implied):
        return current_status
    return implied


def _depletion_rank(status: str) -> int:
    # Full < Half < Low < Out; unknown statuses sort as Full
    try:
        return PANTRY_STATUSES.index(status)
    except ValueError:
        return 0


def meal_count_for_ingredient(name: str, meal_recipe_ids: Sequence[str],
                              recipes: Mapping[str, Recipe]) -> int:
    """How many meals used a recipe containing this ingredient name."""
    key = normalize_name(name)
    if not key:
        return 0
    count = 0
    for recipe_id in meal_recipe_ids:
        recipe = recipes.get(recipe_id)
        if recipe is not None and recipe.contains(key):
            count += 1
    return count


def _counted_meal_recipe_ids(store: JsonStore, now: datetime, window_days: Optional[int]) -> List[str]:
    rows = store.query("meal_history")
    if window_days is None:
        return [r.get("recipe_id") for r in rows if r.get("recipe_id")]
    cutoff = now - timedelta(days=window_days)
    ids = []
    for r in rows:
        ts = parse_timestamp(r.get("consumed_at"))
        if r.get("recipe_id") and ts is not None and ts >= cutoff:
            ids.append(r.get("recipe_id"))
    return ids


def run_depletion_for_recipe(store: JsonStore, recipe_id: str, *, now: Optional[datetime] = None,
                             window_days: Optional[int] = DEPLETION_WINDOW_DAYS) -> Outcome:
    """Re-derive the status of every staple used by a recipe.

    Returns an Outcome whose value lists (staple name, old status, new status)
    for each staple that changed. A missing recipe, or one without
    ingredients, is a successful no-op. Staples are never created here.
    """
    now = now or datetime.now()
    try:
        recipe = get_recipe(store, recipe_id)
        if recipe is None or not recipe.ingredients:
            logger.debug("Depletion skipped: recipe %s missing or empty", recipe_id)
            return Outcome.success([])

        meal_ids = _counted_meal_recipe_ids(store, now, window_days)
        recipes = recipe_index(store)
        pantry = reading_from_staples(store)

        changes: List[Tuple[str, str, str]] = []
        for key in recipe.ingredient_keys():
            staple = pantry.get(key)
            if staple is None:
                continue
            count = meal_count_for_ingredient(staple.name, meal_ids, recipes)
            old = staple.status
            new = status_from_meal_count(count, old)
            # Persist first, then notify through the aggregate
            if new != old:
                update_staple(store, staple.id, {"status": new, "updated_at": now.isoformat()})
                pantry.set_status(staple, new, when=now)
                changes.append((staple.name, old, new))
                logger.info("Staple %r: %s -> %s (%d meals)", staple.name, old, new, count)
    except DataAccessError as e:
        logger.error("Depletion failed for recipe %s: %s", recipe_id, e)
        return Outcome.failure(e.message)
    return Outcome.success(changes)


def depletion_counts(store: JsonStore) -> Dict[str, int]:
    """Lifetime meal count per staple name (for diagnostics and the pantry view)."""
    recipes = recipe_index(store)
    meal_ids = _counted_meal_recipe_ids(store, datetime.now(), None)
    pantry = reading_from_staples(store)
    return {s.name: meal_count_for_ingredient(s.name, meal_ids, recipes) for s in pantry.get_items()}
