"""Shopping list operations over the shopping_list_items collection.

Every function returns an Outcome; data-access failures become failure
outcomes carrying the store's message.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from dinner.domain.Ingredient import RecipeIngredient
from dinner.domain.Outcome import Outcome
from dinner.domain.ShoppingList import ShoppingList, ShoppingListItem
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.logic.shopping.list_builder import items_from_recipe

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().isoformat()


def get_shopping_list(store: JsonStore) -> Outcome:
    """Newest items first; value is a ShoppingList."""
    try:
        rows = store.query("shopping_list_items", sort=[("added_at", "desc")])
    except DataAccessError as e:
        logger.error("Failed to load shopping list: %s", e)
        return Outcome.failure(e.message)
    return Outcome.success(ShoppingList(ShoppingListItem.from_dict(r) for r in rows))


def add_shopping_item(store: JsonStore, name: str, qty: Optional[str] = None) -> Outcome:
    name = (name or "").strip()
    if not name:
        return Outcome.failure("Item name is required")
    try:
        row = store.insert("shopping_list_items", {
            "name": name,
            "qty": (qty or "").strip() or None,
            "checked": False,
            "recipe_id": None,
            "added_at": _now(),
        })
    except DataAccessError as e:
        return Outcome.failure(e.message)
    return Outcome.success(ShoppingListItem.from_dict(row), id=row["id"])


def add_recipe_ingredients_to_shopping_list(store: JsonStore, recipe_id: str,
                                            ingredients: Iterable[RecipeIngredient]) -> Outcome:
    items = items_from_recipe(recipe_id, ingredients, added_at=_now())
    if not items:
        return Outcome.success([])
    try:
        rows = store.insert("shopping_list_items", items)
    except DataAccessError as e:
        return Outcome.failure(e.message)
    logger.info("Added %d items from recipe %s to shopping list", len(rows), recipe_id)
    return Outcome.success([ShoppingListItem.from_dict(r) for r in rows])


def toggle_shopping_item(store: JsonStore, item_id: str, checked: bool) -> Outcome:
    try:
        updated = store.update("shopping_list_items", {"id": item_id}, {"checked": bool(checked)})
    except DataAccessError as e:
        return Outcome.failure(e.message)
    if not updated:
        return Outcome.failure("Shopping list item not found")
    return Outcome.success(ShoppingListItem.from_dict(updated[0]), id=item_id)


def remove_shopping_item(store: JsonStore, item_id: str) -> Outcome:
    try:
        removed = store.delete("shopping_list_items", {"id": item_id})
    except DataAccessError as e:
        return Outcome.failure(e.message)
    if not removed:
        return Outcome.failure("Shopping list item not found")
    return Outcome.success(removed)


def clear_checked_items(store: JsonStore) -> Outcome:
    try:
        removed = store.delete("shopping_list_items", {"checked": True})
    except DataAccessError as e:
        return Outcome.failure(e.message)
    return Outcome.success(removed)
