"""Simple Event Bus / Observer implementation for meal plan changes.

Event names:
  meal_plan.recipe_added          -> {"date", "meal_type", "recipe_id", "count"}
  meal_plan.recipe_removed        -> {"date", "meal_type", "recipe_id", "removed", "count"}
  meal_plan.slot_evicted          -> {"date", "meal_type"}
  meal_plan.meal_type_registered  -> {"date", "label", "index"}
  meal_plan.meal_type_unregistered -> {"date", "label", "index"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
RECIPE_ADDED = "meal_plan.recipe_added"
RECIPE_REMOVED = "meal_plan.recipe_removed"
SLOT_EVICTED = "meal_plan.slot_evicted"
MEAL_TYPE_REGISTERED = "meal_plan.meal_type_registered"
MEAL_TYPE_UNREGISTERED = "meal_plan.meal_type_unregistered"

ALL_PLAN_EVENTS = (RECIPE_ADDED, RECIPE_REMOVED, SLOT_EVICTED, MEAL_TYPE_REGISTERED, MEAL_TYPE_UNREGISTERED)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				# listeners run after the mutation is committed
				logger.exception("Error delivering %s to %r", event_name, cb)


# Package-level bus; stores default to it unless given their own
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'ALL_PLAN_EVENTS',
	'RECIPE_ADDED', 'RECIPE_REMOVED', 'SLOT_EVICTED', 'MEAL_TYPE_REGISTERED', 'MEAL_TYPE_UNREGISTERED',
]
