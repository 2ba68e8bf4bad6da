"""Builders shared by the test modules."""
from datetime import datetime
from typing import Iterable, Optional

from dinner.domain.Ingredient import RecipeIngredient
from dinner.domain.Recipe import Recipe
from dinner.infra.Meal_Repository import insert_meal
from dinner.infra.Pantry_Repository import insert_staple, reading_from_staples
from dinner.infra.Recipe_Repository import insert_recipe
from dinner.infra.Store import JsonStore

USER = "00000000-0000-0000-0000-000000000001"


def ing(name: str, essential: bool = True, qty=None, unit: Optional[str] = None) -> RecipeIngredient:
    return RecipeIngredient(name, qty, unit, essential)


def make_recipe(title: str, *names: str, id: Optional[str] = None, optional: Iterable[str] = ()) -> Recipe:
    ingredients = [ing(n) for n in names] + [ing(n, essential=False) for n in optional]
    return Recipe(id=id or title.lower().replace(" ", "-"), title=title, ingredients=ingredients)


def add_recipe(store: JsonStore, title: str, *names: str, optional: Iterable[str] = ()) -> Recipe:
    recipe = Recipe(title=title, ingredients=[ing(n) for n in names] + [ing(n, False) for n in optional])
    return insert_recipe(store, recipe)


def add_staples(store: JsonStore, *names: str):
    for name in names:
        insert_staple(store, name)


def staple(store: JsonStore, name: str):
    return reading_from_staples(store).get(name)


def log_meals(store: JsonStore, recipe_id: str, count: int, when: Optional[datetime] = None):
    for _ in range(count):
        insert_meal(store, recipe_id, USER, when or datetime(2025, 1, 6, 19, 0))
