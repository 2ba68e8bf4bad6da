"""Shopping list builder.

Turns recipe ingredients into shopping list rows: one unchecked row per named
ingredient, quantity rendered as display text ("2 cup", "3", "pinch").
"""
from typing import Any, Dict, Iterable, List, Optional

from dinner.domain.Ingredient import RecipeIngredient


def _fmt_number(qty) -> str:
    if isinstance(qty, float) and qty.is_integer():
        return str(int(qty))
    return str(qty)


def format_qty(qty, unit: Optional[str]) -> Optional[str]:
    """Display text for a quantity/unit pair, None when both are missing."""
    unit = (unit or "").strip() or None
    if qty is not None and unit:
        return f"{_fmt_number(qty)} {unit}"
    if qty is not None:
        return _fmt_number(qty)
    return unit


def items_from_recipe(recipe_id: str, ingredients: Iterable[RecipeIngredient], *,
                      added_at: Optional[str] = None) -> List[Dict[str, Any]]:
    """Rows for bulk-adding a recipe's ingredients; blank names are skipped."""
    items: List[Dict[str, Any]] = []
    for ing in ingredients:
        name = (ing.name or "").strip()
        if not name:
            continue
        items.append({
            'name': name,
            'qty': format_qty(ing.qty, ing.unit),
            'checked': False,
            'recipe_id': recipe_id,
            'added_at': added_at,
        })
    return items


__all__ = ['format_qty', 'items_from_recipe']
