"""Meal plan persistence: one row per (date, mealType, recipeId) in a JSON file."""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from mealcal.domain.Errors import InvalidArgument
from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.domain.Recipe import Recipe
from mealcal.events.Event_Bus import EventBus
from mealcal.infra.paths import PLAN_FILE
from mealcal.infra.Recipe_Repository import RecipeRepository

logger = logging.getLogger(__name__)


class PlanRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else PLAN_FILE

    @staticmethod
    def _empty() -> dict:
        return {"rows": [], "customMealTypes": {}}

    def _read(self) -> dict:
        """Read the plan file, dropping parts that do not have the expected shape."""
        if not os.path.exists(self.path):
            return self._empty()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read meal plan %s: %s", self.path, e)
            return self._empty()
        if not isinstance(data, dict):
            logger.error("Meal plan %s is not a JSON object; ignoring it", self.path)
            return self._empty()

        rows = data.get("rows", [])
        if not isinstance(rows, list):
            logger.warning("Meal plan 'rows' is not a list; ignoring it")
            rows = []
        kept_rows = [row for row in rows if isinstance(row, dict)]
        if len(kept_rows) != len(rows):
            logger.warning("Dropped %d plan rows that are not objects", len(rows) - len(kept_rows))

        custom = data.get("customMealTypes", {})
        if not isinstance(custom, dict):
            logger.warning("Meal plan 'customMealTypes' is not an object; ignoring it")
            custom = {}
        kept_custom = {}
        for date, labels in custom.items():
            if isinstance(labels, list):
                kept_custom[date] = [label for label in labels if isinstance(label, str)]
            else:
                logger.warning("Custom meal types for %r are not a list; ignoring them", date)
        return {"rows": kept_rows, "customMealTypes": kept_custom}

    def save(self, store: MealPlanStore) -> None:
        """Write every (slot, recipe) row with a snapshot of the recipe.

        The snapshot lets a row survive the recipe being deleted from the
        catalog; the catalog copy still wins on load while it exists.
        """
        rows = [
            {"date": slot.date, "mealType": slot.meal_type, "recipeId": recipe.id, "recipe": recipe.to_dict()}
            for slot in store.slots()
            for recipe in slot.recipes
        ]
        payload = {
            "rows": rows,
            "customMealTypes": store.custom_meal_type_registry(),
        }
        os.makedirs(self.path.parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.debug("Saved %d plan rows to %s", len(rows), self.path)

    @staticmethod
    def _resolve(row: dict, recipes: dict) -> Optional[Recipe]:
        recipe_id = str(row.get("recipeId", ""))
        recipe = recipes.get(recipe_id)
        if recipe is not None:
            return recipe
        snapshot = row.get("recipe")
        if isinstance(snapshot, dict) and recipe_id:
            return Recipe.from_dict({**snapshot, "id": recipe_id})
        return None

    def load(self, store: MealPlanStore, catalog: RecipeRepository) -> MealPlanStore:
        """Replace the store's contents with what is on disk.

        Recipe ids are resolved through the catalog, then through the row's
        saved snapshot. Rows with neither, or carrying invalid dates, are
        skipped. Replaying does not publish events on the store's bus.
        """
        data = self._read()
        bus = store.event_bus
        store.set_event_bus(EventBus())
        skipped = 0
        try:
            store.clear()
            for date, labels in data["customMealTypes"].items():
                for label in labels:
                    try:
                        store.register_custom_meal_type(date, label)
                    except InvalidArgument as e:
                        logger.warning("Skipping custom meal type %r on %r: %s", label, date, e)

            recipes = catalog.index_by_id() if data["rows"] else {}
            for row in data["rows"]:
                recipe = self._resolve(row, recipes)
                if recipe is None:
                    logger.warning("Plan row references unknown recipe %r; skipped", row.get("recipeId"))
                    skipped += 1
                    continue
                try:
                    store.add_recipe(row.get("date"), row.get("mealType"), recipe)
                except InvalidArgument as e:
                    logger.warning("Skipping invalid plan row %r: %s", row, e)
                    skipped += 1
        finally:
            store.set_event_bus(bus)
        logger.info("Loaded %d plan slots from %s (%d rows skipped)", len(store), self.path, skipped)
        return store
