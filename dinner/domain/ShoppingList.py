"""Shopping list items and the list aggregate (no uniqueness: the same name may appear twice)."""
from typing import Iterable, List, Optional


class ShoppingListItem:
    def __init__(self, id: Optional[str] = None, name: str = "", qty: Optional[str] = None,
                 checked: bool = False, recipe_id: Optional[str] = None, added_at: Optional[str] = None):
        self.id = id
        self.name = name
        self.qty = qty
        self.checked = checked
        # Set when bulk-added from a recipe, None for manual items
        self.recipe_id = recipe_id
        self.added_at = added_at

    def __str__(self) -> str:
        mark = "x" if self.checked else " "
        return f"[{mark}] {self.name}" + (f" - {self.qty}" if self.qty else "")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingListItem(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            qty=d.get("qty"),
            checked=bool(d.get("checked", False)),
            recipe_id=d.get("recipe_id"),
            added_at=d.get("added_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "qty": self.qty,
            "checked": self.checked,
            "recipe_id": self.recipe_id,
            "added_at": self.added_at,
        }


class ShoppingList:
    def __init__(self, items: Optional[Iterable[ShoppingListItem]] = None):
        self.items: List[ShoppingListItem] = list(items or [])

    def get_items(self):
        return self.items

    def pending(self) -> List[ShoppingListItem]:
        return [i for i in self.items if not i.checked]

    def checked(self) -> List[ShoppingListItem]:
        return [i for i in self.items if i.checked]

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()
