"""Web-facing observers for meal plan events.

A PlanEventLog subscribes to an EventBus for every meal_plan.* event and
keeps a bounded in-memory ring buffer of recent events that the web layer
can poll. Each app owns its own log, fed only by its own bus.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; uvicorn may run handlers on worker threads.
  * max_events (MAX_PLAN_EVENTS by default) caps memory use.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import EventBus, GLOBAL_EVENT_BUS, ALL_PLAN_EVENTS
from mealcal.utilities.constants import MAX_PLAN_EVENTS

logger = logging.getLogger(__name__)

_PAYLOAD_KEYS = ('date', 'meal_type', 'recipe_id', 'label', 'index', 'count', 'removed')


class PlanEventLog:
    def __init__(self, max_events: int = MAX_PLAN_EVENTS):
        self.max_events = max_events
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self._buses: List[EventBus] = []

    def attach(self, bus: EventBus) -> 'PlanEventLog':
        """Idempotent: subscribe to every plan event on ``bus`` once."""
        if any(b is bus for b in self._buses):
            return self
        for name in ALL_PLAN_EVENTS:
            bus.subscribe(name, self._record)
        self._buses.append(bus)
        logger.debug("Event log subscribed to %d plan events", len(ALL_PLAN_EVENTS))
        return self

    def detach(self):
        for bus in self._buses:
            for name in ALL_PLAN_EVENTS:
                bus.unsubscribe(name, self._record)
        self._buses.clear()

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            }
            if isinstance(payload, dict):
                for k in _PAYLOAD_KEYS:
                    if k in payload:
                        evt[k] = payload[k]
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns every buffered event.
        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}

    def reset(self):
        """Drop buffered events and restart ids at 1."""
        with self._lock:
            self._events.clear()
            self._next_id = 1


def start(bus: Optional[EventBus] = None, log: Optional[PlanEventLog] = None) -> PlanEventLog:
    """Attach ``log`` (a new one by default) to ``bus`` (the package bus by default)."""
    log = log if log is not None else PlanEventLog()
    return log.attach(bus if bus is not None else GLOBAL_EVENT_BUS)


__all__ = ['PlanEventLog', 'start']
