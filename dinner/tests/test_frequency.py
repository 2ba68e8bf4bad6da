import tempfile
import unittest

from dinner.domain.Pantry import PantryStaple
from dinner.events.Event_Bus import GLOBAL_EVENT_BUS, PANTRY_RANKS_RECALCULATED
from dinner.infra.Store import JsonStore
from dinner.logic.pantry.frequency import compute_frequency_ranks, frequency_score, recalculate_frequency_ranks
from dinner.tests.factories import add_recipe, add_staples, log_meals, make_recipe, staple


class TestComputeFrequencyRanks(unittest.TestCase):

    def test_score_is_product(self):
        self.assertEqual(frequency_score(4, 6), 24)
        self.assertEqual(frequency_score(3, 0), 0)

    def test_blank_staple_skipped(self):
        recipes = {"a": make_recipe("A", "salt", id="a")}
        ranks = compute_frequency_ranks([PantryStaple(id="s1", name="  "), PantryStaple(id="s2", name="Salt")],
                                        recipes, ["a"])
        self.assertEqual(ranks, {"s2": 1})


class TestRecalculateFrequencyRanks(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonStore(self._tmp.name)
        self.events = []
        self._cb = lambda name, payload: self.events.append(payload)
        GLOBAL_EVENT_BUS.subscribe(PANTRY_RANKS_RECALCULATED, self._cb)

    def tearDown(self):
        GLOBAL_EVENT_BUS.unsubscribe(PANTRY_RANKS_RECALCULATED, self._cb)
        self._tmp.cleanup()

    def test_flour_in_four_recipes_six_meals(self):
        bread = add_recipe(self.store, "Bread", "flour", "yeast")
        pancakes = add_recipe(self.store, "Pancakes", "Flour", "eggs")
        add_recipe(self.store, "Pizza", "flour", "cheese")
        add_recipe(self.store, "Cookies", "FLOUR", "butter")
        add_staples(self.store, "flour", "eggs", "saffron")
        log_meals(self.store, bread.id, 4)
        log_meals(self.store, pancakes.id, 2)

        outcome = recalculate_frequency_ranks(self.store)

        self.assertTrue(outcome.ok)
        self.assertEqual(staple(self.store, "flour").frequency_rank, 24)
        self.assertEqual(staple(self.store, "eggs").frequency_rank, 2)
        self.assertEqual(staple(self.store, "saffron").frequency_rank, 0)
        self.assertEqual(self.events[-1], {"updated": 2, "total": 3})

    def test_empty_pantry(self):
        outcome = recalculate_frequency_ranks(self.store)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.value, {})


if __name__ == "__main__":
    unittest.main()
