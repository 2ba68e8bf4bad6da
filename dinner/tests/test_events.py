import unittest

from dinner.domain.Pantry import PantryStaple
from dinner.events import web_observers
from dinner.events.Event_Bus import EventBus, PANTRY_LOW_STOCK, PANTRY_STATUS_CHANGED


class TestEventBus(unittest.TestCase):

    def test_subscriber_error_does_not_propagate(self):
        bus = EventBus()
        received = []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe("x", broken)
        bus.subscribe("x", lambda name, payload: received.append(payload))
        with self.assertLogs("dinner.events.Event_Bus", level="ERROR"):
            bus.publish("x", 1)
        self.assertEqual(received, [1])

    def test_unsubscribe(self):
        bus = EventBus()
        cb = lambda name, payload: None  # noqa: E731
        bus.subscribe("x", cb)
        self.assertEqual(bus.subscriber_count("x"), 1)
        bus.unsubscribe("x", cb)
        self.assertEqual(bus.subscriber_count("x"), 0)


class TestWebObservers(unittest.TestCase):

    def setUp(self):
        web_observers.clear()

    def tearDown(self):
        web_observers.clear()

    def test_cursor_and_ring_buffer(self):
        garlic = PantryStaple(id="s1", name="Garlic", status="Low", frequency_rank=4)
        web_observers._record(PANTRY_STATUS_CHANGED, {"staple": garlic, "previous": "Half", "status": "Low"})
        first = web_observers.get_events()
        self.assertEqual(first["events"][0]["name"], "Garlic")
        self.assertEqual(first["events"][0]["previous"], "Half")

        web_observers._record(PANTRY_LOW_STOCK, {"staple": garlic, "frequency_rank": 4})
        newer = web_observers.get_events(first["next_cursor"])
        self.assertEqual([e["type"] for e in newer["events"]], ["pantry.low_stock"])
        self.assertEqual(newer["events"][0]["frequency_rank"], 4)

        for _ in range(web_observers.MAX_EVENTS + 10):
            web_observers._record(PANTRY_LOW_STOCK, {"staple": garlic, "frequency_rank": 4})
        self.assertEqual(len(web_observers.get_events()["events"]), web_observers.MAX_EVENTS)


if __name__ == "__main__":
    unittest.main()
