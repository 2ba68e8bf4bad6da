from fastapi import APIRouter, Depends, Response

from dinner.api.responses import error_response
from dinner.domain.Outcome import Outcome
from dinner.infra.Recipe_Repository import get_recipe
from dinner.infra.Shopping_Repository import (
    add_recipe_ingredients_to_shopping_list, add_shopping_item, clear_checked_items,
    get_shopping_list, remove_shopping_item, toggle_shopping_item,
)
from dinner.infra.Store import JsonStore, get_store
from dinner.infra.pdf_utils import generate_pdf_for_shopping_list
from dinner.utilities.validators import ShoppingItemInput

router = APIRouter(prefix="/api/shopping-list", tags=["shopping"])


@router.get("")
def api_shopping_list(store: JsonStore = Depends(get_store)):
    outcome = get_shopping_list(store)
    if not outcome:
        return error_response(outcome, status_code=500)
    return {"items": [item.to_dict() for item in outcome.value.get_items()]}


@router.post("", status_code=201)
def api_add_item(body: ShoppingItemInput, store: JsonStore = Depends(get_store)):
    outcome = add_shopping_item(store, body.name, body.qty)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "id": outcome.id, "item": outcome.value.to_dict()}


@router.post("/from-recipe/{recipe_id}", status_code=201)
def api_add_from_recipe(recipe_id: str, store: JsonStore = Depends(get_store)):
    recipe = get_recipe(store, recipe_id)
    if recipe is None:
        return error_response(Outcome.failure("Recipe not found"))
    outcome = add_recipe_ingredients_to_shopping_list(store, recipe.id, recipe.ingredients)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "added": len(outcome.value)}


@router.post("/{item_id}/toggle")
def api_toggle_item(item_id: str, checked: bool = True, store: JsonStore = Depends(get_store)):
    outcome = toggle_shopping_item(store, item_id, checked)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "item": outcome.value.to_dict()}


@router.delete("/checked")
def api_clear_checked(store: JsonStore = Depends(get_store)):
    outcome = clear_checked_items(store)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "removed": outcome.value}


@router.delete("/{item_id}")
def api_remove_item(item_id: str, store: JsonStore = Depends(get_store)):
    outcome = remove_shopping_item(store, item_id)
    if not outcome:
        return error_response(outcome)
    return {"ok": True}


@router.get("/pdf")
def api_shopping_list_pdf(store: JsonStore = Depends(get_store)):
    outcome = get_shopping_list(store)
    if not outcome:
        return error_response(outcome, status_code=500)
    pdf_bytes = generate_pdf_for_shopping_list(outcome.value)
    headers = {"Content-Disposition": 'attachment; filename="shopping_list.pdf"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)
