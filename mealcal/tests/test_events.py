import unittest

from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.domain.Recipe import Recipe
from mealcal.events import web_observers
from mealcal.events.Event_Bus import (
    EventBus, RECIPE_ADDED, RECIPE_REMOVED, SLOT_EVICTED, MEAL_TYPE_REGISTERED, MEAL_TYPE_UNREGISTERED,
)


class Recorder:
    def __init__(self, bus, *names):
        self.received = []
        for name in names:
            bus.subscribe(name, self)

    def __call__(self, event_name, payload):
        self.received.append((event_name, payload))

    def names(self):
        return [name for name, _ in self.received]


class TestEventBus(unittest.TestCase):

    def test_subscribe_is_idempotent_and_unsubscribe_is_safe(self):
        bus = EventBus()
        cb = lambda name, payload: None
        bus.subscribe(RECIPE_ADDED, cb)
        bus.subscribe(RECIPE_ADDED, cb)
        self.assertEqual(bus.subscriber_count(RECIPE_ADDED), 1)
        bus.unsubscribe(RECIPE_ADDED, cb)
        bus.unsubscribe(RECIPE_ADDED, cb)
        self.assertEqual(bus.subscriber_count(RECIPE_ADDED), 0)

    def test_failing_listener_does_not_block_others(self):
        bus = EventBus()

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe(RECIPE_ADDED, broken)
        rec = Recorder(bus, RECIPE_ADDED)
        with self.assertLogs('mealcal.events.Event_Bus', level='ERROR'):
            bus.publish(RECIPE_ADDED, {"date": "2024-01-17"})
        self.assertEqual(rec.names(), [RECIPE_ADDED])


class TestStoreEvents(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.rec = Recorder(self.bus, RECIPE_ADDED, RECIPE_REMOVED, SLOT_EVICTED,
                            MEAL_TYPE_REGISTERED, MEAL_TYPE_UNREGISTERED)
        self.store = MealPlanStore(duplicate_policy="allow", unregister_policy="cascade", event_bus=self.bus)
        self.soup = Recipe(id="soup", name="Tomato Soup")

    def test_add_and_remove_publish(self):
        self.store.add_recipe("2024-01-17", "Lunch", self.soup)
        self.store.add_recipe("2024-01-17", "lunch", self.soup)
        self.store.remove_recipe("2024-01-17", "lunch", "soup")
        self.assertEqual(self.rec.names(), [RECIPE_ADDED, RECIPE_ADDED, RECIPE_REMOVED, SLOT_EVICTED])
        added = self.rec.received[1][1]
        self.assertEqual(added, {"date": "2024-01-17", "meal_type": "lunch", "recipe_id": "soup", "count": 2})
        removed = self.rec.received[2][1]
        self.assertEqual((removed["removed"], removed["count"]), (2, 0))

    def test_noop_operations_publish_nothing(self):
        self.store.remove_recipe("2024-01-17", "lunch", "soup")
        self.store.register_custom_meal_type("2024-01-17", "dinner")
        self.store.unregister_custom_meal_type("2024-01-17", 0)
        self.assertEqual(self.rec.received, [])

    def test_meal_type_events_and_cascade(self):
        self.store.register_custom_meal_type("2024-01-17", "supper")
        self.store.add_recipe("2024-01-17", "supper", self.soup)
        self.store.unregister_custom_meal_type("2024-01-17", 0)
        self.assertEqual(self.rec.names(), [MEAL_TYPE_REGISTERED, RECIPE_ADDED, MEAL_TYPE_UNREGISTERED, SLOT_EVICTED])
        self.assertEqual(self.rec.received[0][1], {"date": "2024-01-17", "label": "supper", "index": 0})

    def test_set_event_bus(self):
        other = EventBus()
        rec = Recorder(other, RECIPE_ADDED)
        self.store.set_event_bus(other)
        self.store.add_recipe("2024-01-17", "lunch", self.soup)
        self.assertEqual(self.rec.received, [])
        self.assertEqual(rec.names(), [RECIPE_ADDED])


class TestPlanEventLog(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.log = web_observers.start(self.bus)
        self.log.attach(self.bus)
        self.store = MealPlanStore(duplicate_policy="allow", unregister_policy="orphan", event_bus=self.bus)

    def test_events_buffered_with_cursor(self):
        self.store.add_recipe("2024-01-17", "lunch", Recipe(id="soup", name="Tomato Soup"))
        first = self.log.get_events()
        # attaching twice still records each event once
        self.assertEqual(len(first["events"]), 1)
        evt = first["events"][0]
        self.assertEqual(evt["type"], RECIPE_ADDED)
        self.assertEqual(evt["recipe_id"], "soup")
        self.assertTrue(evt["ts"].endswith("Z"))

        self.store.remove_recipe("2024-01-17", "lunch", "soup")
        newer = self.log.get_events(since=first["next_cursor"])
        self.assertEqual([e["type"] for e in newer["events"]], [RECIPE_REMOVED, SLOT_EVICTED])
        self.assertEqual(self.log.get_events(since=newer["next_cursor"])["events"], [])

    def test_buffer_is_bounded(self):
        log = web_observers.PlanEventLog(max_events=10).attach(self.bus)
        for i in range(15):
            self.store.register_custom_meal_type("2024-01-17", f"extra {i}")
        events = log.get_events()["events"]
        self.assertEqual(len(events), 10)
        self.assertEqual(events[-1]["id"], 15)

    def test_logs_on_different_buses_are_independent(self):
        other_bus = EventBus()
        other_log = web_observers.start(other_bus)
        other_store = MealPlanStore(duplicate_policy="allow", unregister_policy="orphan", event_bus=other_bus)

        self.store.add_recipe("2024-01-17", "lunch", Recipe(id="soup", name="Tomato Soup"))
        self.assertEqual(other_log.get_events(), {"events": [], "next_cursor": 0})
        other_store.add_recipe("2024-01-18", "dinner", Recipe(id="stew", name="Stew"))
        self.assertEqual([e["recipe_id"] for e in self.log.get_events()["events"]], ["soup"])
        self.assertEqual([e["recipe_id"] for e in other_log.get_events()["events"]], ["stew"])

    def test_detach_and_reset(self):
        self.store.add_recipe("2024-01-17", "lunch", Recipe(id="soup", name="Tomato Soup"))
        self.log.reset()
        self.assertEqual(self.log.get_events()["events"], [])
        self.log.detach()
        self.assertEqual(self.bus.subscriber_count(RECIPE_ADDED), 0)
        self.store.add_recipe("2024-01-17", "lunch", Recipe(id="soup", name="Tomato Soup"))
        self.assertEqual(self.log.get_events()["events"], [])


if __name__ == '__main__':
    unittest.main()
