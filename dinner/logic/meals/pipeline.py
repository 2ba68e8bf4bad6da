"""Meal-log pipeline: record the meal, then refresh the derived pantry state.

Steps run in order:

    record   insert the meal_history row        (failure aborts)
    deplete  re-derive staple statuses          (failure recorded, meal kept)
    rank     recompute staple frequency ranks   (failure recorded, meal kept)

Both derive steps are full recomputations from the stored history, so
re-running them is safe. A report with a failed derive step is ``stale``
and can be handed back to ``MealLogPipeline.retry``.
"""
from __future__ import annotations
import calendar
import logging
from datetime import date, datetime, time
from typing import Dict, List, Optional

from dinner.domain.MealEntry import MealEntry, parse_timestamp
from dinner.domain.Outcome import Outcome
from dinner.events.event_helpers import publish_meal_logged
from dinner.infra.Meal_Repository import insert_meal, reading_from_meals
from dinner.infra.Recipe_Repository import get_recipe
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.logic.pantry.depletion import run_depletion_for_recipe
from dinner.logic.pantry.frequency import recalculate_frequency_ranks
from dinner.logic.recipes.service import get_or_create_quick_note_recipe_id
from dinner.utilities.config import REUSE_LOOKBACK_MONTHS

logger = logging.getLogger(__name__)

__all__ = [
    "STEP_OK", "STEP_FAILED", "STEP_SKIPPED", "STEPS",
    "MealLogReport", "MealLogPipeline",
    "log_meal_as_consumed", "log_quick_note", "reuse_last_same_weekday",
]

STEP_OK = "ok"
STEP_FAILED = "failed"
STEP_SKIPPED = "skipped"

STEPS = ("record", "deplete", "rank")
DERIVE_STEPS = ("deplete", "rank")


class MealLogReport:
    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        self.meal: Optional[MealEntry] = None
        self.steps: Dict[str, str] = {name: STEP_SKIPPED for name in STEPS}
        self.errors: Dict[str, str] = {}

    @property
    def ok(self) -> bool:
        """True once the meal is recorded, whatever happened afterwards."""
        return self.steps["record"] == STEP_OK

    @property
    def stale(self) -> bool:
        return self.ok and any(self.steps[s] != STEP_OK for s in DERIVE_STEPS)

    @property
    def failed_steps(self) -> List[str]:
        return [s for s in STEPS if self.steps[s] == STEP_FAILED]

    @property
    def error(self) -> Optional[str]:
        return self.errors.get("record")

    def _mark(self, step: str, outcome: Outcome):
        if outcome.ok:
            self.steps[step] = STEP_OK
            self.errors.pop(step, None)
        else:
            self.steps[step] = STEP_FAILED
            self.errors[step] = outcome.error

    def __str__(self) -> str:
        return f"MealLogReport({self.recipe_id}: {self.steps})"

    __repr__ = __str__

    def to_dict(self):
        d = {
            "ok": self.ok,
            "stale": self.stale,
            "steps": dict(self.steps),
            "errors": dict(self.errors),
        }
        if self.meal is not None:
            d["id"] = self.meal.id
            d["meal"] = self.meal.to_dict()
        return d


def _naive(ts: Optional[datetime]) -> Optional[datetime]:
    return parse_timestamp(ts) if ts is not None else None


class MealLogPipeline:
    def __init__(self, store: JsonStore, user_id: str, now: Optional[datetime] = None):
        self.store = store
        self.user_id = user_id
        self.now = now

    def _now(self) -> datetime:
        return self.now or datetime.now()

    def _record(self, report: MealLogReport, consumed_at: datetime, note, tags) -> Outcome:
        try:
            if get_recipe(self.store, report.recipe_id) is None:
                return Outcome.failure("Recipe not found")
            report.meal = insert_meal(self.store, report.recipe_id, self.user_id, consumed_at, note, tags)
        except DataAccessError as e:
            logger.error("Could not log meal for recipe %s: %s", report.recipe_id, e)
            return Outcome.failure(e.message)
        return Outcome.success(id=report.meal.id)

    def _derive(self, report: MealLogReport, step: str):
        if step == "deplete":
            outcome = run_depletion_for_recipe(self.store, report.recipe_id, now=self._now())
        else:
            outcome = recalculate_frequency_ranks(self.store)
        report._mark(step, outcome)
        if not outcome.ok:
            logger.warning("Meal %s logged but %s step failed: %s",
                           report.meal.id if report.meal else "?", step, outcome.error)

    def run(self, recipe_id: str, consumed_at: Optional[datetime] = None, note: Optional[str] = None,
            tags: Optional[List[str]] = None) -> MealLogReport:
        report = MealLogReport(recipe_id)
        if not recipe_id:
            report._mark("record", Outcome.failure("Recipe is required"))
            return report
        consumed_at = _naive(consumed_at) or self._now()

        report._mark("record", self._record(report, consumed_at, note, tags))
        if not report.ok:
            return report
        publish_meal_logged(report.meal.id, recipe_id, report.meal.consumed_at.isoformat())

        for step in DERIVE_STEPS:
            self._derive(report, step)
        return report

    def retry(self, report: MealLogReport) -> MealLogReport:
        """Re-run the derive steps that did not complete; a failed record is not retried."""
        if not report.ok:
            return report
        for step in DERIVE_STEPS:
            if report.steps[step] != STEP_OK:
                self._derive(report, step)
        return report


def log_meal_as_consumed(store: JsonStore, recipe_id: str, user_id: str, consumed_at: Optional[datetime] = None,
                         note: Optional[str] = None, tags: Optional[List[str]] = None) -> MealLogReport:
    return MealLogPipeline(store, user_id).run(recipe_id, consumed_at, note, tags)


def log_quick_note(store: JsonStore, note: str, user_id: str,
                   consumed_at: Optional[datetime] = None) -> MealLogReport:
    """Log a free-text meal against the Quick-note recipe."""
    text = (note or "").strip()
    if not text:
        report = MealLogReport("")
        report._mark("record", Outcome.failure("Note is required"))
        return report
    sentinel = get_or_create_quick_note_recipe_id(store)
    if not sentinel:
        report = MealLogReport("")
        report._mark("record", sentinel)
        return report
    return MealLogPipeline(store, user_id).run(sentinel.value, consumed_at, note=text)


def _months_before(d: date, months: int) -> date:
    year, month = divmod(d.year * 12 + d.month - 1 - months, 12)
    month += 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def reuse_last_same_weekday(store: JsonStore, target_date: date, user_id: str, *,
                            months: int = REUSE_LOOKBACK_MONTHS) -> Outcome:
    """Log again the newest meal eaten on the same weekday as target_date.

    Only meals strictly before target_date and within the last ``months``
    months count; Quick notes are ignored. Value: the MealLogReport.
    """
    if isinstance(target_date, datetime):
        target_date = target_date.date()
    start = datetime.combine(_months_before(target_date, months), time.min)
    end = datetime.combine(target_date, time.min)
    dow = (target_date.weekday() + 1) % 7
    try:
        meals = reading_from_meals(store)
    except DataAccessError as e:
        return Outcome.failure(e.message)
    for meal in meals:
        if meal.consumed_at is None or not (start <= meal.consumed_at < end):
            continue
        if meal.weekday != dow or meal.is_quick_note or meal.recipe is None:
            continue
        consumed_at = datetime.combine(target_date, datetime.now().time())
        report = MealLogPipeline(store, user_id).run(meal.recipe_id, consumed_at)
        if not report.ok:
            return Outcome.failure(report.error)
        logger.info("Reused %r from %s", meal.recipe.title, meal.consumed_at.date())
        return Outcome.success(report, id=report.meal.id)
    return Outcome.failure("No meal found on this weekday in the last 2 months")
