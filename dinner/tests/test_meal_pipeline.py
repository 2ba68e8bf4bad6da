from datetime import date, datetime, timezone
import tempfile
import unittest
from unittest import mock

from dinner.domain.Outcome import Outcome
from dinner.events.Event_Bus import GLOBAL_EVENT_BUS, MEAL_LOGGED
from dinner.infra.Meal_Repository import reading_from_meals
from dinner.infra.Store import JsonStore
from dinner.logic.meals import pipeline
from dinner.logic.meals.pipeline import (
    MealLogPipeline, log_meal_as_consumed, log_quick_note, reuse_last_same_weekday,
)
from dinner.tests.factories import USER, add_recipe, add_staples, log_meals, staple


class TestMealLogPipeline(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonStore(self._tmp.name)
        self.pasta = add_recipe(self.store, "Garlic Pasta", "garlic", "pasta")
        add_staples(self.store, "garlic", "pasta")
        self.logged = []
        self._cb = lambda name, payload: self.logged.append(payload)
        GLOBAL_EVENT_BUS.subscribe(MEAL_LOGGED, self._cb)

    def tearDown(self):
        GLOBAL_EVENT_BUS.unsubscribe(MEAL_LOGGED, self._cb)
        self._tmp.cleanup()

    def test_all_steps_run(self):
        log_meals(self.store, self.pasta.id, 2)
        report = log_meal_as_consumed(self.store, self.pasta.id, USER, datetime(2025, 1, 6, 19))
        self.assertTrue(report.ok)
        self.assertFalse(report.stale)
        self.assertEqual(report.steps, {"record": "ok", "deplete": "ok", "rank": "ok"})
        self.assertEqual(staple(self.store, "garlic").status, "Half")
        self.assertEqual(staple(self.store, "garlic").frequency_rank, 3)
        self.assertEqual(self.logged[-1]["recipe_id"], self.pasta.id)

    def test_meal_row_fields(self):
        report = log_meal_as_consumed(self.store, self.pasta.id, USER, datetime(2025, 1, 6, 19),
                                      note="leftovers", tags=["weeknight"])
        row = self.store.get("meal_history", report.meal.id)
        self.assertEqual(row["user_id"], USER)
        self.assertEqual(row["consumed_at"], "2025-01-06T19:00:00")
        self.assertEqual(row["note"], "leftovers")
        self.assertEqual(row["tags"], ["weeknight"])

    def test_aware_timestamp_stored_naive(self):
        aware = datetime(2025, 1, 6, 19, tzinfo=timezone.utc)
        report = log_meal_as_consumed(self.store, self.pasta.id, USER, aware)
        self.assertIsNone(report.meal.consumed_at.tzinfo)

    def test_derive_failure_keeps_meal_and_retry_recovers(self):
        with mock.patch.object(pipeline, "run_depletion_for_recipe", return_value=Outcome.failure("disk full")):
            report = log_meal_as_consumed(self.store, self.pasta.id, USER)
        self.assertTrue(report.ok)
        self.assertTrue(report.stale)
        self.assertEqual(report.steps["deplete"], "failed")
        self.assertEqual(report.steps["rank"], "ok")
        self.assertEqual(report.errors, {"deplete": "disk full"})
        self.assertEqual(len(self.store.query("meal_history")), 1)

        MealLogPipeline(self.store, USER).retry(report)
        self.assertFalse(report.stale)
        self.assertEqual(report.failed_steps, [])

    def test_record_failure_skips_derive_steps(self):
        report = MealLogPipeline(self.store, USER).run("")
        self.assertFalse(report.ok)
        self.assertEqual(report.steps, {"record": "failed", "deplete": "skipped", "rank": "skipped"})
        self.assertEqual(self.store.query("meal_history"), [])

    def test_unknown_recipe_is_rejected(self):
        report = log_meal_as_consumed(self.store, "missing", USER)
        self.assertFalse(report.ok)
        self.assertEqual(report.error, "Recipe not found")
        self.assertEqual(self.store.query("meal_history"), [])

    def test_quick_note(self):
        report = log_quick_note(self.store, "  pizza at Sam's  ", USER)
        self.assertTrue(report.ok)
        again = log_quick_note(self.store, "sushi", USER)
        notes = self.store.query("recipes", {"title": "Quick note"})
        self.assertEqual(len(notes), 1)
        self.assertEqual(report.meal.recipe_id, again.meal.recipe_id)
        self.assertEqual(report.meal.note, "pizza at Sam's")

    def test_blank_quick_note_rejected(self):
        report = log_quick_note(self.store, "   ", USER)
        self.assertFalse(report.ok)
        self.assertEqual(report.error, "Note is required")


class TestReuseLastSameWeekday(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonStore(self._tmp.name)
        self.tacos = add_recipe(self.store, "Tacos", "tortillas")
        self.soup = add_recipe(self.store, "Soup", "leek")

    def tearDown(self):
        self._tmp.cleanup()

    def test_reuses_newest_same_weekday_meal(self):
        log_meals(self.store, self.soup.id, 1, when=datetime(2024, 12, 30, 19))
        log_meals(self.store, self.tacos.id, 1, when=datetime(2025, 1, 6, 19))
        log_meal_as_consumed(self.store, self.soup.id, USER, datetime(2025, 1, 7, 19))
        log_quick_note(self.store, "takeout", USER, datetime(2025, 1, 12, 19))

        outcome = reuse_last_same_weekday(self.store, date(2025, 1, 13), USER)

        self.assertTrue(outcome.ok)
        newest = reading_from_meals(self.store, limit=1)[0]
        self.assertEqual(newest.recipe_id, self.tacos.id)
        self.assertEqual(newest.consumed_at.date(), date(2025, 1, 13))

    def test_ignores_meals_older_than_two_months(self):
        log_meals(self.store, self.tacos.id, 1, when=datetime(2024, 11, 4, 19))
        outcome = reuse_last_same_weekday(self.store, date(2025, 1, 13), USER)
        self.assertFalse(outcome.ok)

    def test_same_day_not_reused(self):
        log_meals(self.store, self.tacos.id, 1, when=datetime(2025, 1, 13, 12))
        self.assertFalse(reuse_last_same_weekday(self.store, date(2025, 1, 13), USER).ok)


if __name__ == "__main__":
    unittest.main()
