import logging
from typing import Dict, List, Optional

from dinner.domain.Recipe import Recipe
from dinner.infra.Store import JsonStore
from dinner.utilities.constants import QUICK_NOTE_TITLE

logger = logging.getLogger(__name__)


def reading_from_recipes(store: JsonStore, *, include_quick_note: bool = False) -> List[Recipe]:
    """Load the recipe catalog; the Quick-note sentinel is left out unless asked for."""
    recipes = [Recipe.from_dict(row) for row in store.query("recipes")]
    if include_quick_note:
        return recipes
    return [r for r in recipes if not r.is_quick_note]


def get_recipe(store: JsonStore, recipe_id: str) -> Optional[Recipe]:
    row = store.get("recipes", recipe_id)
    return Recipe.from_dict(row) if row else None


def recipe_index(store: JsonStore) -> Dict[str, Recipe]:
    """recipe id -> Recipe for every stored recipe, sentinel included (used for joins)."""
    return {r.id: r for r in reading_from_recipes(store, include_quick_note=True) if r.id}


def find_quick_note(store: JsonStore) -> Optional[Recipe]:
    rows = store.query("recipes", {"title": QUICK_NOTE_TITLE}, limit=1)
    return Recipe.from_dict(rows[0]) if rows else None


def insert_recipe(store: JsonStore, recipe: Recipe) -> Recipe:
    row = recipe.to_dict()
    if row.get("id") is None:
        row.pop("id")
    stored = store.insert("recipes", row)
    logger.info("Saved recipe %r (%s)", recipe.title, stored["id"])
    return Recipe.from_dict(stored)
