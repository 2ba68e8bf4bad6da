"""Recipe domain entity: title, instructions, embedded ingredients, source url, edit counter."""
from typing import List, Optional

from dinner.domain.Ingredient import RecipeIngredient
from dinner.utilities.constants import QUICK_NOTE_TITLE


class Recipe:
    def __init__(self, id: Optional[str] = None, title: str = "", instructions: str = "",
                 ingredients: Optional[List[RecipeIngredient]] = None,
                 source_url: Optional[str] = None, edit_count: int = 0):
        self.id = id
        self.title = title
        self.instructions = instructions
        self.ingredients = ingredients[:] if ingredients else []
        self.source_url = source_url
        self.edit_count = edit_count

    def __str__(self) -> str:
        return f"{self.title} - {len(self.ingredients)} ingredients ({len(self.essentials())} essential)"

    __repr__ = __str__

    @property
    def is_quick_note(self) -> bool:
        return self.title == QUICK_NOTE_TITLE

    def essentials(self) -> List[RecipeIngredient]:
        return [ing for ing in self.ingredients if ing.is_essential]

    def ingredient_keys(self) -> List[str]:
        """Distinct normalized ingredient names in recipe order, blanks dropped."""
        keys: List[str] = []
        for ing in self.ingredients:
            k = ing.key
            if k and k not in keys:
                keys.append(k)
        return keys

    def contains(self, name: str) -> bool:
        return any(ing.matches(name) for ing in self.ingredients)

    @staticmethod
    def from_dict(data):
        d = dict(data)
        ingredients = d.get('ingredients') or []
        if not isinstance(ingredients, list):
            ingredients = []
        return Recipe(
            id=d.get('id'),
            title=d.get('title') or "",
            instructions=d.get('instructions') or "",
            ingredients=[RecipeIngredient.from_dict(ing) for ing in ingredients],
            source_url=d.get('source_url'),
            edit_count=d.get('edit_count') or 0,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "instructions": self.instructions,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "source_url": self.source_url,
            "edit_count": self.edit_count,
        }
