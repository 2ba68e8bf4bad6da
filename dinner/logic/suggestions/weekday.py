"""Day-of-week recommender: "what do we usually cook on this weekday?"

Pure function of its inputs. Given a target date, the joined meal history,
the recipe catalog and the pantry, it returns one primary suggestion and up
to MAX_ALTERNATIVES alternatives, each with a human-readable reason.

Steps:
  1. Meals in the lookback window (target midnight minus 14 days up to the
     end of the target day), Quick notes dropped, are counted per recipe:
     on the same weekday, and in total.
  2. Same-weekday candidates ranked by that count (ties keep history order).
  3. Primary = first candidate whose essentials are >= 80% stocked, else the
     top candidate flagged as low on staples.
  4. No same-weekday history: the most-eaten catalog recipe that is covered.
  5. Alternatives: top same-weekday candidates, then the rest of the catalog.
"""
from __future__ import annotations
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence, Union

from dinner.domain.MealEntry import MealEntry
from dinner.domain.Pantry import Pantry
from dinner.domain.Recipe import Recipe
from dinner.logic.suggestions.coverage import EMPTY_AS_COVERED, Coverage, pantry_coverage
from dinner.utilities.config import (
    COVERAGE_THRESHOLD, MAX_ALTERNATIVES, SAME_WEEKDAY_ALTERNATIVES, SUGGESTION_LOOKBACK_DAYS,
)
from dinner.utilities.constants import DAY_NAMES

__all__ = ["SuggestedRecipe", "Suggestion", "suggest_for_date", "weekday_index"]


class SuggestedRecipe:
    def __init__(self, recipe: Recipe, reason: str, coverage: Coverage, low_stock: bool = False):
        self.recipe = recipe
        self.reason = reason
        self.coverage = coverage
        self.low_stock = low_stock

    def __str__(self) -> str:
        return f"{self.recipe.title}: {self.reason}"

    __repr__ = __str__

    def to_dict(self):
        return {
            "recipe_id": self.recipe.id,
            "title": self.recipe.title,
            "reason": self.reason,
            "low_stock": self.low_stock,
            "coverage": self.coverage.to_dict(),
        }


class Suggestion:
    def __init__(self, day_name: str, primary: Optional[SuggestedRecipe] = None,
                 alternatives: Optional[List[SuggestedRecipe]] = None):
        self.day_name = day_name
        self.primary = primary
        self.alternatives = alternatives or []

    @property
    def is_empty(self) -> bool:
        """Nothing to suggest: the caller should invite the user to log more meals."""
        return self.primary is None and not self.alternatives

    def to_dict(self):
        return {
            "day": self.day_name,
            "primary": self.primary.to_dict() if self.primary else None,
            "alternatives": [a.to_dict() for a in self.alternatives],
            "empty": self.is_empty,
        }


def weekday_index(d: Union[date, datetime]) -> int:
    """0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def _ratio(coverage: Coverage) -> float:
    return coverage.ratio(EMPTY_AS_COVERED)


def suggest_for_date(target: Union[date, datetime], meals: Sequence[MealEntry], recipes: Sequence[Recipe],
                     pantry: Pantry, *, lookback_days: int = SUGGESTION_LOOKBACK_DAYS,
                     threshold: float = COVERAGE_THRESHOLD, max_alternatives: int = MAX_ALTERNATIVES,
                     same_weekday_alternatives: int = SAME_WEEKDAY_ALTERNATIVES) -> Suggestion:
    target_day = target.date() if isinstance(target, datetime) else target
    dow = weekday_index(target_day)
    day_name = DAY_NAMES[dow]
    start = datetime.combine(target_day, time.min) - timedelta(days=lookback_days)
    end = datetime.combine(target_day + timedelta(days=1), time.min)

    catalog = [r for r in recipes if not r.is_quick_note]

    # 1. per-recipe counts inside the window
    on_dow: Dict[str, int] = {}
    by_id: Dict[str, Recipe] = {}
    for m in meals:
        if m.recipe is None or m.is_quick_note or m.consumed_at is None:
            continue
        if not (start <= m.consumed_at < end):
            continue
        by_id.setdefault(m.recipe_id, m.recipe)
        if m.weekday == dow:
            on_dow[m.recipe_id] = on_dow.get(m.recipe_id, 0) + 1

    # 2. same-weekday ranking; sorted() is stable so ties keep first-seen order
    same_dow = sorted(on_dow.items(), key=lambda kv: kv[1], reverse=True)

    # all-time counts over whatever history was passed in
    all_time = Counter(m.recipe_id for m in meals)

    # 3. primary from same-weekday history
    primary: Optional[SuggestedRecipe] = None
    for recipe_id, count in same_dow:
        recipe = by_id[recipe_id]
        cov = pantry_coverage(recipe, pantry)
        if _ratio(cov) >= threshold:
            primary = SuggestedRecipe(
                recipe, f"You often have this on {day_name}s. Cooked {count}× in the last 2 weeks.", cov)
            break
        if primary is None:
            primary = SuggestedRecipe(
                recipe,
                f"Uses staples you're low on – consider restocking. Cooked {count}× on {day_name}s.",
                cov, low_stock=True)

    # 4. fallback: most-eaten covered recipe
    if primary is None and catalog:
        best: Optional[Recipe] = None
        best_cov: Optional[Coverage] = None
        best_count = -1
        for recipe in catalog:
            cov = pantry_coverage(recipe, pantry)
            if _ratio(cov) < threshold:
                continue
            count = all_time.get(recipe.id, 0)
            if count > best_count:
                best, best_cov, best_count = recipe, cov, count
        if best is not None:
            primary = SuggestedRecipe(best, f"Cooked {best_count}× in recent history.", best_cov)

    primary_id = primary.recipe.id if primary else None

    # 5. alternatives
    alternatives: List[SuggestedRecipe] = []
    for recipe_id, count in same_dow[:same_weekday_alternatives]:
        if recipe_id == primary_id:
            continue
        recipe = by_id[recipe_id]
        cov = pantry_coverage(recipe, pantry)
        if cov.total and _ratio(cov) < threshold:
            alternatives.append(SuggestedRecipe(
                recipe, f"Uses staples you're low on. Cooked {count}×.", cov, low_stock=True))
        else:
            alternatives.append(SuggestedRecipe(recipe, f"Cooked {count}× on {day_name}s.", cov))

    seen = {a.recipe.id for a in alternatives}
    for recipe in catalog:
        if len(alternatives) >= max_alternatives:
            break
        if recipe.id in seen or recipe.id == primary_id:
            continue
        cov = pantry_coverage(recipe, pantry)
        if cov.total and _ratio(cov) < threshold:
            alternatives.append(SuggestedRecipe(recipe, "Uses staples you're low on.", cov, low_stock=True))
        else:
            count = all_time.get(recipe.id, 0)
            alternatives.append(SuggestedRecipe(recipe, f"Cooked {count}× in recent history.", cov))
        seen.add(recipe.id)

    return Suggestion(day_name, primary, alternatives[:max_alternatives])
