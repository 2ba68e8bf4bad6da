"""Recipe ingredient entity: name, optional quantity and unit, essential flag."""
from typing import Optional, Union


def normalize_name(name) -> str:
    """Matching key for ingredient and staple names: trimmed, lower-cased, nothing else."""
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


class RecipeIngredient:
    def __init__(self, name: str = "", qty: Optional[Union[int, float]] = None,
                 unit: Optional[str] = None, is_essential: bool = True):
        self.name = name
        self.qty = qty
        self.unit = unit
        self.is_essential = is_essential

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    def matches(self, name: str) -> bool:
        return bool(self.key) and self.key == normalize_name(name)

    def __str__(self) -> str:
        parts = [self.name]
        if self.qty is not None:
            parts.append(f"{self.qty}")
        if self.unit:
            parts.append(self.unit)
        label = " ".join(parts)
        return label if self.is_essential else f"{label} (optional)"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, RecipeIngredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data):
        '''Creates an ingredient from a stored row. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return RecipeIngredient(
            name=str(d.get("name") or ""),
            qty=d.get("qty"),
            unit=d.get("unit"),
            is_essential=bool(d.get("is_essential", True)),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "qty": self.qty,
            "unit": self.unit,
            "is_essential": self.is_essential,
        }
