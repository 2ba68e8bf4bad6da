from datetime import datetime
import tempfile
import unittest

from dinner.domain.Pantry import PantryStaple
from dinner.events import web_observers
from dinner.infra.Store import JsonStore
from dinner.logic.pantry.analysis import split_stock_up, stock_up_list
from dinner.logic.pantry.stock import mark_staple_as_stocked, set_staple_status
from dinner.tests.factories import add_staples, staple


class TestStockChanges(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonStore(self._tmp.name)
        add_staples(self.store, "garlic")
        self.garlic_id = staple(self.store, "garlic").id
        web_observers.start()
        web_observers.clear()

    def tearDown(self):
        web_observers.clear()
        self._tmp.cleanup()

    def test_set_status_out_and_alert(self):
        outcome = set_staple_status(self.store, self.garlic_id, "Out")
        self.assertTrue(outcome.ok)
        self.assertEqual(staple(self.store, "garlic").status, "Out")
        events = web_observers.get_events()["events"]
        self.assertEqual(events[-1]["type"], "pantry.status_changed")
        self.assertEqual((events[-1]["previous"], events[-1]["status"]), ("Full", "Out"))

    def test_low_status_raises_low_stock_alert(self):
        set_staple_status(self.store, self.garlic_id, "Low")
        types = [e["type"] for e in web_observers.get_events()["events"]]
        self.assertEqual(types, ["pantry.status_changed", "pantry.low_stock"])

    def test_invalid_status(self):
        outcome = set_staple_status(self.store, self.garlic_id, "Empty")
        self.assertFalse(outcome.ok)
        self.assertEqual(staple(self.store, "garlic").status, "Full")

    def test_mark_stocked(self):
        set_staple_status(self.store, self.garlic_id, "Low")
        when = datetime(2025, 2, 1, 10, 30)
        outcome = mark_staple_as_stocked(self.store, self.garlic_id, now=when)
        self.assertTrue(outcome.ok)
        row = staple(self.store, "garlic")
        self.assertEqual(row.status, "Full")
        self.assertEqual(row.last_restocked, when.isoformat())
        self.assertEqual(row.marked_stocked_at, when.isoformat())

    def test_missing_staple(self):
        self.assertEqual(mark_staple_as_stocked(self.store, "nope").error, "Staple not found")
        self.assertEqual(set_staple_status(self.store, "nope", "Low").error, "Staple not found")


class TestStockUp(unittest.TestCase):

    def test_order_and_split(self):
        staples = [
            PantryStaple(id="1", name="rice", status="Low", frequency_rank=2),
            PantryStaple(id="2", name="beans", status="Out", frequency_rank=1),
            PantryStaple(id="3", name="garlic", status="Low", frequency_rank=9),
            PantryStaple(id="4", name="salt", status="Full", frequency_rank=50),
            PantryStaple(id="5", name="oil", status="Half"),
        ]
        self.assertEqual([s.name for s in stock_up_list(staples)], ["beans", "garlic", "rice"])
        split = split_stock_up(staples)
        self.assertEqual([r["name"] for r in split["out"]], ["beans"])
        self.assertEqual([r["name"] for r in split["low"]], ["garlic", "rice"])
        self.assertEqual(split["count"], 3)


if __name__ == "__main__":
    unittest.main()
