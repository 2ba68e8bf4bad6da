"""Meal history entry: one consumed meal, append-only."""
from datetime import datetime
from typing import List, Optional

from dinner.domain.Recipe import Recipe


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored ISO timestamp; aware values are converted to naive local time."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value:
        try:
            ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


class MealEntry:
    def __init__(self, id: Optional[str] = None, recipe_id: str = "", user_id: str = "",
                 consumed_at: Optional[datetime] = None, note: Optional[str] = None,
                 tags: Optional[List[str]] = None, recipe: Optional[Recipe] = None):
        self.id = id
        self.recipe_id = recipe_id
        self.user_id = user_id
        self.consumed_at = consumed_at
        self.note = note
        self.tags = tags[:] if tags else []
        # Joined recipe, may be missing when the row points at a deleted recipe
        self.recipe = recipe

    @property
    def is_quick_note(self) -> bool:
        return bool(self.recipe and self.recipe.is_quick_note)

    @property
    def weekday(self) -> Optional[int]:
        """0=Sunday .. 6=Saturday."""
        if self.consumed_at is None:
            return None
        return (self.consumed_at.weekday() + 1) % 7

    def __str__(self) -> str:
        title = self.recipe.title if self.recipe else self.recipe_id
        when = self.consumed_at.isoformat() if self.consumed_at else "?"
        return f"{title} @ {when}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, recipe: Optional[Recipe] = None):
        d = dict(data)
        return MealEntry(
            id=d.get("id"),
            recipe_id=d.get("recipe_id") or "",
            user_id=d.get("user_id") or "",
            consumed_at=parse_timestamp(d.get("consumed_at")),
            note=d.get("note"),
            tags=list(d.get("tags") or []),
            recipe=recipe,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "recipe_id": self.recipe_id,
            "user_id": self.user_id,
            "consumed_at": self.consumed_at.isoformat() if self.consumed_at else None,
            "note": self.note,
            "tags": self.tags,
        }
