"""Event helper utilities.

Small wrappers that build the payloads for meal plan events so the store
and the web observers agree on their shape.

Quick import:
    from mealcal.events.event_helpers import (
        publish_recipe_added, publish_recipe_removed, publish_slot_evicted,
        publish_meal_type_registered, publish_meal_type_unregistered
    )
"""
from __future__ import annotations
from typing import Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    RECIPE_ADDED, RECIPE_REMOVED, SLOT_EVICTED, MEAL_TYPE_REGISTERED, MEAL_TYPE_UNREGISTERED,
)

__all__ = [
    'publish_recipe_added', 'publish_recipe_removed', 'publish_slot_evicted',
    'publish_meal_type_registered', 'publish_meal_type_unregistered',
]


def _bus(bus: Optional[EventBus]) -> EventBus:
    return bus if bus is not None else GLOBAL_EVENT_BUS


def publish_recipe_added(date: str, meal_type: str, recipe_id: str, count: int, bus: Optional[EventBus] = None):
    """Publish a meal_plan.recipe_added event; ``count`` is the slot size after the add."""
    _bus(bus).publish(RECIPE_ADDED, {
        'date': date,
        'meal_type': meal_type,
        'recipe_id': recipe_id,
        'count': count,
    })


def publish_recipe_removed(date: str, meal_type: str, recipe_id: str, removed: int, count: int,
                           bus: Optional[EventBus] = None):
    _bus(bus).publish(RECIPE_REMOVED, {
        'date': date,
        'meal_type': meal_type,
        'recipe_id': recipe_id,
        'removed': removed,
        'count': count,
    })


def publish_slot_evicted(date: str, meal_type: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(SLOT_EVICTED, {'date': date, 'meal_type': meal_type})


def publish_meal_type_registered(date: str, label: str, index: int, bus: Optional[EventBus] = None):
    _bus(bus).publish(MEAL_TYPE_REGISTERED, {'date': date, 'label': label, 'index': index})


def publish_meal_type_unregistered(date: str, label: str, index: int, bus: Optional[EventBus] = None):
    _bus(bus).publish(MEAL_TYPE_UNREGISTERED, {'date': date, 'label': label, 'index': index})
