from fastapi import APIRouter, Depends, Query

from dinner.api.responses import error_response
from dinner.infra.Meal_Repository import reading_from_meals
from dinner.infra.Store import JsonStore, get_store
from dinner.logic.meals.pipeline import log_meal_as_consumed, log_quick_note, reuse_last_same_weekday
from dinner.utilities.config import DEFAULT_USER_ID
from dinner.utilities.validators import MealLogInput, QuickNoteInput, ReuseLastInput

router = APIRouter(prefix="/api/meals", tags=["meals"])


def _meal_row(meal):
    row = meal.to_dict()
    row["recipe"] = {"id": meal.recipe.id, "title": meal.recipe.title} if meal.recipe else None
    return row


@router.get("")
def api_list_meals(limit: int = Query(default=200, ge=1, le=1000), store: JsonStore = Depends(get_store)):
    """Meal history, newest first, joined with recipe titles."""
    return {"meals": [_meal_row(m) for m in reading_from_meals(store, limit=limit)]}


@router.post("", status_code=201)
def api_log_meal(body: MealLogInput, store: JsonStore = Depends(get_store)):
    report = log_meal_as_consumed(store, body.recipe_id, DEFAULT_USER_ID, body.consumed_at, body.note, body.tags)
    if not report.ok:
        return error_response(report)
    return report.to_dict()


@router.post("/quick-note", status_code=201)
def api_quick_note(body: QuickNoteInput, store: JsonStore = Depends(get_store)):
    report = log_quick_note(store, body.note, DEFAULT_USER_ID, body.consumed_at)
    if not report.ok:
        return error_response(report)
    return report.to_dict()


@router.post("/reuse-last", status_code=201)
def api_reuse_last(body: ReuseLastInput, store: JsonStore = Depends(get_store)):
    outcome = reuse_last_same_weekday(store, body.target_date, DEFAULT_USER_ID)
    if not outcome:
        return error_response(outcome, status_code=404)
    return outcome.value.to_dict()
