"""Simple Event Bus / Observer implementation for pantry and meal-log events.

Event names:
  pantry.status_changed -> payload {"staple": PantryStaple, "previous": str, "status": str}
  pantry.low_stock -> payload {"staple": PantryStaple, "frequency_rank": int}
  pantry.ranks_recalculated -> payload {"updated": int, "total": int}
  meal.logged -> payload {"meal_id": str, "recipe_id": str, "consumed_at": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PANTRY_STATUS_CHANGED = "pantry.status_changed"
PANTRY_LOW_STOCK = "pantry.low_stock"
PANTRY_RANKS_RECALCULATED = "pantry.ranks_recalculated"
MEAL_LOGGED = "meal.logged"


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
				# subscriber errors never reach the publisher
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'PANTRY_STATUS_CHANGED', 'PANTRY_LOW_STOCK', 'PANTRY_RANKS_RECALCULATED', 'MEAL_LOGGED'
]
