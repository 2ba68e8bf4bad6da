from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dinner.infra.Meal_Repository import reading_from_meals
from dinner.infra.Pantry_Repository import reading_from_staples
from dinner.infra.Recipe_Repository import reading_from_recipes
from dinner.infra.Store import JsonStore, get_store
from dinner.logic.suggestions.coverage import EMPTY_EXCLUDED, pantry_coverage
from dinner.logic.suggestions.surprise import pick_recipe_weighted
from dinner.logic.suggestions.weekday import suggest_for_date

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


@router.get("")
def api_suggest(target: Optional[date] = Query(default=None, alias="date"), store: JsonStore = Depends(get_store)):
    """Primary + alternatives for a day (today when no date is given)."""
    suggestion = suggest_for_date(
        target or date.today(),
        reading_from_meals(store),
        reading_from_recipes(store),
        reading_from_staples(store),
    )
    return suggestion.to_dict()


@router.get("/surprise")
def api_surprise(store: JsonStore = Depends(get_store)):
    pantry = reading_from_staples(store)
    recipe = pick_recipe_weighted(reading_from_recipes(store), pantry)
    if recipe is None:
        return {"recipe": None}
    cov = pantry_coverage(recipe, pantry)
    return {
        "recipe": {"id": recipe.id, "title": recipe.title},
        "coverage": {"ok": cov.ok, "total": cov.total, "ratio": cov.ratio(EMPTY_EXCLUDED)},
    }
