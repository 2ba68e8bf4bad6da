from typing import Final

# Reserved recipe used to log free-text meals
QUICK_NOTE_TITLE: Final[str] = "Quick note"
PLACEHOLDER_INGREDIENT_NAME: Final[str] = "Unnamed ingredient"

STATUS_FULL: Final[str] = "Full"
STATUS_HALF: Final[str] = "Half"
STATUS_LOW: Final[str] = "Low"
STATUS_OUT: Final[str] = "Out"
PANTRY_STATUSES: Final[tuple[str, ...]] = (STATUS_FULL, STATUS_HALF, STATUS_LOW, STATUS_OUT)
STOCKED_STATUSES: Final[frozenset[str]] = frozenset({STATUS_FULL, STATUS_HALF})

# Sunday first, matching a 0=Sunday weekday index
DAY_NAMES: Final[tuple[str, ...]] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"
)

COLLECTIONS: Final[tuple[str, ...]] = ("recipes", "meal_history", "pantry_staples", "shopping_list_items")

FETCH_USER_AGENT: Final[str] = "Mozilla/5.0 (compatible; RecipeBot/1.0)"

PROMPT_TEMPLATE: Final[str] = (
    """Extract the recipe from this web page. Return a single JSON object (no markdown, no code fence) with:
- title: string
- instructions: string (full instructions, can be multi-line)
- ingredients: array of { "name": string, "qty": number or null, "unit": string or null, "is_essential": boolean }
  Use is_essential: true for core ingredients, false for garnishes, optional toppings, or vanity items.
"""
)
RECIPE_JSON_FORMAT: Final[str] = (
    """
{
    "title": str,
    "instructions": str,
    "ingredients": [
      {
        "name": str,
        "qty": float | null,
        "unit": str | null,
        "is_essential": bool
      },
    ]
}
    """
)
