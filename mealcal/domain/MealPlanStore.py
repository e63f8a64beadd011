"""MealPlanStore: in-memory calendar of recipe assignments.

Rules:
  - A slot exists only while it holds at least one recipe; the remove that
    empties it also evicts it.
  - breakfast / lunch / dinner are available on every date; any other label
    must be registered for a date before it shows up in meal_types_for_date.
  - Recipes are references: the store never mutates them, it only keeps them
    in insertion order per slot.

Two behaviours are configurable:
  duplicate_policy  "allow"  -> the same recipe id may appear twice in a slot
                    "dedupe" -> adding an id already in the slot is a no-op
  unregister_policy "orphan"  -> removing a custom type keeps its slots
                    "cascade" -> removing a custom type evicts its slot on that date
"""
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from mealcal.domain.Errors import InvalidArgument
from mealcal.domain.MealSlot import MealSlot
from mealcal.domain.Recipe import Recipe
from mealcal.domain.Week import DateLike, to_iso, in_week
from mealcal.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from mealcal.events.event_helpers import (
    publish_recipe_added, publish_recipe_removed, publish_slot_evicted,
    publish_meal_type_registered, publish_meal_type_unregistered,
)
from mealcal.utilities import config
from mealcal.utilities.constants import DEFAULT_MEAL_TYPES, DUPLICATE_POLICIES, UNREGISTER_POLICIES

logger = logging.getLogger(__name__)


def normalize_meal_type(meal_type: str) -> str:
    """Strip and lowercase a meal type label; raise InvalidArgument when empty."""
    if not isinstance(meal_type, str) or not meal_type.strip():
        raise InvalidArgument("Meal type must be a non-empty string", field="meal_type")
    return meal_type.strip().lower()


class MealPlanStore:
    def __init__(self, duplicate_policy: Optional[str] = None, unregister_policy: Optional[str] = None,
                 event_bus: Optional[EventBus] = None):
        duplicate_policy = (duplicate_policy or config.DUPLICATE_POLICY).lower()
        unregister_policy = (unregister_policy or config.UNREGISTER_POLICY).lower()
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise InvalidArgument(f"Unknown duplicate policy '{duplicate_policy}'", field="duplicate_policy")
        if unregister_policy not in UNREGISTER_POLICIES:
            raise InvalidArgument(f"Unknown unregister policy '{unregister_policy}'", field="unregister_policy")
        self.duplicate_policy = duplicate_policy
        self.unregister_policy = unregister_policy
        self._slots: List[MealSlot] = []
        self._custom_meal_types: Dict[str, List[str]] = {}
        self._event_bus = event_bus if event_bus is not None else GLOBAL_EVENT_BUS

    # --- Observer helpers -------------------------------------------------
    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def set_event_bus(self, bus: EventBus):
        self._event_bus = bus
        return self

    # --- Slots --------------------------------------------------------------
    def find_slot(self, date: DateLike, meal_type: str) -> Optional[MealSlot]:
        """Return the slot for (date, meal_type) or None when nothing is assigned."""
        key = (to_iso(date), normalize_meal_type(meal_type))
        return self._find(key)

    def _find(self, key: Tuple[str, str]) -> Optional[MealSlot]:
        for slot in self._slots:
            if slot.key == key:
                return slot
        return None

    def add_recipe(self, date: DateLike, meal_type: str, recipe: Recipe) -> MealSlot:
        """Append ``recipe`` to the slot, creating the slot on first use."""
        iso = to_iso(date)
        label = normalize_meal_type(meal_type)
        if recipe is None or not getattr(recipe, "id", None):
            raise InvalidArgument("Recipe must have a non-empty id", field="recipe")

        slot = self._find((iso, label))
        if slot is None:
            slot = MealSlot(iso, label, [recipe])
            self._slots.append(slot)
            logger.debug("Created slot %s with recipe %s", slot.id, recipe.id)
        elif self.duplicate_policy == "dedupe" and recipe.id in slot.recipe_ids():
            logger.debug("Recipe %s already in slot %s; skipped (dedupe)", recipe.id, slot.id)
            return slot
        else:
            slot.recipes.append(recipe)
            logger.debug("Appended recipe %s to slot %s (%d recipes)", recipe.id, slot.id, len(slot))
        publish_recipe_added(iso, label, recipe.id, len(slot), bus=self._event_bus)
        return slot

    def remove_recipe(self, date: DateLike, meal_type: str, recipe_id: str) -> int:
        """Remove every occurrence of ``recipe_id`` from the slot.

        Returns the number of recipes removed (0 when the slot or the recipe
        is missing). A slot left empty is evicted.
        """
        iso = to_iso(date)
        label = normalize_meal_type(meal_type)
        slot = self._find((iso, label))
        if slot is None:
            return 0
        kept = [r for r in slot.recipes if r.id != recipe_id]
        removed = len(slot.recipes) - len(kept)
        if not removed:
            return 0
        slot.recipes = kept
        publish_recipe_removed(iso, label, recipe_id, removed, len(kept), bus=self._event_bus)
        if not kept:
            self._evict(slot)
        return removed

    def _evict(self, slot: MealSlot):
        self._slots.remove(slot)
        logger.debug("Evicted empty slot %s", slot.id)
        publish_slot_evicted(slot.date, slot.meal_type, bus=self._event_bus)

    # --- Meal types ---------------------------------------------------------
    def register_custom_meal_type(self, date: DateLike, label: str) -> bool:
        """Register a custom meal type for ``date``.

        Defaults and already registered labels are ignored; returns True only
        when the label was added.
        """
        iso = to_iso(date)
        label = normalize_meal_type(label)
        if label in DEFAULT_MEAL_TYPES:
            return False
        registered = self._custom_meal_types.setdefault(iso, [])
        if label in registered:
            return False
        registered.append(label)
        publish_meal_type_registered(iso, label, len(registered) - 1, bus=self._event_bus)
        return True

    def unregister_custom_meal_type(self, date: DateLike, index: int) -> Optional[str]:
        """Remove the custom label at ``index`` for ``date`` and return it.

        Out-of-range indexes are a no-op and return None. Existing slots under
        the label are kept unless the store uses the "cascade" policy.
        """
        iso = to_iso(date)
        registered = self._custom_meal_types.get(iso, [])
        if not isinstance(index, int) or not 0 <= index < len(registered):
            return None
        label = registered.pop(index)
        if not registered:
            del self._custom_meal_types[iso]
        publish_meal_type_unregistered(iso, label, index, bus=self._event_bus)
        if self.unregister_policy == "cascade":
            slot = self._find((iso, label))
            if slot is not None:
                self._evict(slot)
        return label

    def custom_meal_types(self, date: DateLike) -> List[str]:
        return list(self._custom_meal_types.get(to_iso(date), []))

    def meal_types_for_date(self, date: DateLike) -> List[str]:
        return list(DEFAULT_MEAL_TYPES) + self.custom_meal_types(date)

    def custom_meal_type_registry(self) -> Dict[str, List[str]]:
        return {d: list(labels) for d, labels in self._custom_meal_types.items()}

    # --- Queries ------------------------------------------------------------
    def slots(self) -> List[MealSlot]:
        return list(self._slots)

    def slots_for_date(self, date: DateLike) -> List[MealSlot]:
        """Slots on ``date`` in display order; labels no longer registered come last."""
        iso = to_iso(date)
        on_date = [s for s in self._slots if s.date == iso]
        order = {label: i for i, label in enumerate(self.meal_types_for_date(iso))}
        return sorted(on_date, key=lambda s: order.get(s.meal_type, len(order)))

    def slots_for_week(self, anchor: DateLike) -> List[MealSlot]:
        return [s for s in self._slots if in_week(s.date, anchor)]

    def orphaned_slots(self) -> List[MealSlot]:
        """Slots whose meal type is neither a default nor registered for their date."""
        return [s for s in self._slots if s.meal_type not in self.meal_types_for_date(s.date)]

    def to_rows(self) -> List[dict]:
        """One persistence row per (slot, recipe): {date, mealType, recipeId}."""
        return [
            {"date": slot.date, "mealType": slot.meal_type, "recipeId": recipe.id}
            for slot in self._slots
            for recipe in slot.recipes
        ]

    def clear(self):
        self._slots.clear()
        self._custom_meal_types.clear()

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[MealSlot]:
        return iter(list(self._slots))

    def __contains__(self, key) -> bool:
        try:
            date, meal_type = key
            return self.find_slot(date, meal_type) is not None
        except (TypeError, ValueError):
            return False

    def __repr__(self) -> str:
        return f"MealPlanStore(slots={len(self._slots)}, custom_dates={len(self._custom_meal_types)})"
