from typing import Optional

from fastapi import APIRouter, Depends, Query

from dinner.api.responses import error_response
from dinner.infra.Store import JsonStore, get_store
from dinner.logic.recipes.service import (
    create_recipe_manually, favorite_recipes, list_recipes, update_recipe_ingredients,
)
from dinner.utilities.validators import IngredientsUpdateInput, RecipeCreateInput

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
def api_list_recipes(search: Optional[str] = Query(default=""), store: JsonStore = Depends(get_store)):
    return {"recipes": list_recipes(store, search or "")}


@router.get("/favorites")
def api_favorite_recipes(search: Optional[str] = Query(default=""),
                         limit: int = Query(default=8, ge=1, le=50),
                         store: JsonStore = Depends(get_store)):
    return {"recipes": favorite_recipes(store, search or "", limit=limit)}


@router.post("", status_code=201)
def api_create_recipe(body: RecipeCreateInput, store: JsonStore = Depends(get_store)):
    outcome = create_recipe_manually(
        store, body.title, [ing.model_dump() for ing in body.ingredients], body.instructions
    )
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "id": outcome.id, "recipe": outcome.value.to_dict()}


@router.put("/{recipe_id}/ingredients")
def api_update_ingredients(recipe_id: str, body: IngredientsUpdateInput, store: JsonStore = Depends(get_store)):
    outcome = update_recipe_ingredients(store, recipe_id, [ing.model_dump() for ing in body.ingredients])
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "id": recipe_id, "recipe": outcome.value.to_dict() if outcome.value else None}
