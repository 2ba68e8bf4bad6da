"""Meal history persistence: append-only inserts and joined reads."""
import logging
from datetime import datetime
from typing import List, Optional

from dinner.domain.MealEntry import MealEntry
from dinner.infra.Recipe_Repository import recipe_index
from dinner.infra.Store import JsonStore

logger = logging.getLogger(__name__)


def insert_meal(store: JsonStore, recipe_id: str, user_id: str, consumed_at: datetime,
                note: Optional[str] = None, tags: Optional[List[str]] = None) -> MealEntry:
    row = store.insert("meal_history", {
        "recipe_id": recipe_id,
        "user_id": user_id,
        "consumed_at": consumed_at.isoformat(),
        "note": note,
        "tags": list(tags or []),
    })
    logger.info("Logged meal %s for recipe %s at %s", row["id"], recipe_id, row["consumed_at"])
    return MealEntry.from_dict(row)


def meal_recipe_ids(store: JsonStore) -> List[str]:
    """One recipe id per meal row (lifetime)."""
    return [row.get("recipe_id") for row in store.query("meal_history") if row.get("recipe_id")]


def reading_from_meals(store: JsonStore, *, limit: Optional[int] = None, join: bool = True) -> List[MealEntry]:
    """Meal history newest first, each entry joined to its recipe when it still exists."""
    rows = store.query("meal_history", sort=[("consumed_at", "desc")], limit=limit)
    index = recipe_index(store) if join else {}
    return [MealEntry.from_dict(row, recipe=index.get(row.get("recipe_id"))) for row in rows]
