"""Recipe catalog services: create, save imported, edit ingredients, list.

Every write keeps the pantry in step with the catalog: ingredient names get
a staple, frequency ranks are recomputed, and an ingredient edit re-derives
the staple statuses for that recipe.
"""
from __future__ import annotations
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Union

from dinner.domain.Ingredient import RecipeIngredient, normalize_name
from dinner.domain.Outcome import Outcome
from dinner.domain.Recipe import Recipe
from dinner.infra.Meal_Repository import meal_recipe_ids
from dinner.infra.Pantry_Repository import insert_staple
from dinner.infra.Recipe_Repository import find_quick_note, get_recipe, insert_recipe, reading_from_recipes
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.logic.pantry.depletion import run_depletion_for_recipe
from dinner.logic.pantry.frequency import recalculate_frequency_ranks
from dinner.utilities.constants import QUICK_NOTE_TITLE

logger = logging.getLogger(__name__)

__all__ = [
    "ensure_staples", "create_recipe_manually", "save_recipe", "update_recipe_ingredients",
    "get_or_create_quick_note_recipe_id", "list_recipes", "favorite_recipes",
]

IngredientLike = Union[RecipeIngredient, Dict[str, Any]]


def _as_ingredients(items: Optional[Iterable[IngredientLike]]) -> List[RecipeIngredient]:
    out = []
    for item in items or []:
        out.append(item if isinstance(item, RecipeIngredient) else RecipeIngredient.from_dict(item))
    return out


def ensure_staples(store: JsonStore, names: Iterable[str]) -> int:
    """Create a Full staple for every distinct non-blank name. Returns how many were new."""
    seen = set()
    created = 0
    for name in names:
        key = normalize_name(name)
        if not key or key in seen:
            continue
        seen.add(key)
        if insert_staple(store, name.strip()):
            created += 1
    return created


def _store_recipe(store: JsonStore, recipe: Recipe) -> Outcome:
    if not (recipe.title or "").strip():
        return Outcome.failure("Title is required")
    recipe.title = recipe.title.strip()
    if normalize_name(recipe.title) == normalize_name(QUICK_NOTE_TITLE):
        return Outcome.failure("Title is reserved")
    try:
        saved = insert_recipe(store, recipe)
        ensure_staples(store, [ing.name for ing in saved.ingredients])
    except DataAccessError as e:
        logger.error("Saving recipe %r failed: %s", recipe.title, e)
        return Outcome.failure(e.message)
    ranks = recalculate_frequency_ranks(store)
    if not ranks:
        logger.warning("Recipe %s saved but ranks not refreshed: %s", saved.id, ranks.error)
    return Outcome.success(saved, id=saved.id)


def create_recipe_manually(store: JsonStore, title: str, ingredients: Optional[Iterable[IngredientLike]] = None,
                           instructions: str = "") -> Outcome:
    recipe = Recipe(title=title or "", instructions=instructions or "", ingredients=_as_ingredients(ingredients))
    return _store_recipe(store, recipe)


def save_recipe(store: JsonStore, recipe: Recipe, source_url: Optional[str] = None) -> Outcome:
    """Persist an imported recipe along with where it came from."""
    recipe.id = None
    recipe.source_url = source_url or recipe.source_url
    recipe.edit_count = 0
    return _store_recipe(store, recipe)


def update_recipe_ingredients(store: JsonStore, recipe_id: str, ingredients: Iterable[IngredientLike]) -> Outcome:
    """Replace a recipe's ingredients, then recompute ranks and re-derive its staples."""
    new_ingredients = _as_ingredients(ingredients)
    try:
        recipe = get_recipe(store, recipe_id)
        if recipe is None:
            return Outcome.failure("Recipe not found")
        store.update("recipes", {"id": recipe_id}, {
            "ingredients": [ing.to_dict() for ing in new_ingredients],
            "edit_count": (recipe.edit_count or 0) + 1,
        })
        ensure_staples(store, [ing.name for ing in new_ingredients])
    except DataAccessError as e:
        return Outcome.failure(e.message)

    ranks = recalculate_frequency_ranks(store)
    if not ranks:
        return Outcome.failure(ranks.error)
    depletion = run_depletion_for_recipe(store, recipe_id)
    if not depletion:
        return Outcome.failure(depletion.error)
    logger.info("Recipe %s ingredients updated (%d)", recipe_id, len(new_ingredients))
    return Outcome.success(get_recipe(store, recipe_id), id=recipe_id)


def get_or_create_quick_note_recipe_id(store: JsonStore) -> Outcome:
    """Id of the Quick-note sentinel recipe, created on first use."""
    try:
        existing = find_quick_note(store)
        if existing is not None:
            return Outcome.success(existing.id, id=existing.id)
        created = insert_recipe(store, Recipe(title=QUICK_NOTE_TITLE))
    except DataAccessError as e:
        return Outcome.failure(e.message)
    return Outcome.success(created.id, id=created.id)


def _with_counts(store: JsonStore, search: str = "") -> List[Dict[str, Any]]:
    counts = Counter(meal_recipe_ids(store))
    needle = (search or "").strip().lower()
    rows = []
    for recipe in reading_from_recipes(store):
        if needle and needle not in recipe.title.lower():
            continue
        row = recipe.to_dict()
        row["meal_count"] = counts.get(recipe.id, 0)
        rows.append(row)
    return rows


def list_recipes(store: JsonStore, search: str = "") -> List[Dict[str, Any]]:
    """Real recipes (no Quick note) by title, each with its lifetime meal count."""
    rows = _with_counts(store, search)
    rows.sort(key=lambda r: r["title"].lower())
    return rows


def favorite_recipes(store: JsonStore, search: str = "", limit: int = 8) -> List[Dict[str, Any]]:
    rows = _with_counts(store, search)
    rows.sort(key=lambda r: r["meal_count"], reverse=True)
    return rows[:limit]
