"""Recipe catalog backed by a JSON file (the cookbook)."""
import json
import logging
import os
import shutil
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from mealcal.domain.Errors import CatalogError, RecipeNotFound
from mealcal.domain.Recipe import Recipe
from mealcal.infra.paths import RECIPES_FILE

logger = logging.getLogger(__name__)


class RecipeRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else RECIPES_FILE

    # --- File helpers -------------------------------------------------------
    def _load_raw(self) -> List[dict]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Recipes file not found: {self.path}. Returning empty list.")
            return []
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in recipes file: {e}")
            raise CatalogError(f"Recipes file {self.path} is not valid JSON") from e
        except OSError as e:
            logger.error(f"Error reading recipes: {e}")
            raise CatalogError(f"Could not read recipes from {self.path}") from e
        if not isinstance(data, list):
            raise CatalogError(f"Recipes file {self.path} must contain a list")
        return data

    def _write_raw(self, recipes: List[dict]):
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".recipes_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(recipes, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error writing recipes: {e}")
            raise CatalogError(f"Could not write recipes to {self.path}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- Catalog ------------------------------------------------------------
    def list_recipes(self) -> List[Recipe]:
        return [Recipe.from_dict(entry) for entry in self._load_raw()]

    def get_recipe(self, recipe_id: str) -> Recipe:
        for entry in self._load_raw():
            if str(entry.get("id", "")) == recipe_id:
                return Recipe.from_dict(entry)
        raise RecipeNotFound(recipe_id)

    def find_by_name(self, name: str) -> Optional[Recipe]:
        target = (name or "").strip().lower()
        for recipe in self.list_recipes():
            if recipe.name.lower() == target:
                return recipe
        return None

    def index_by_id(self) -> Dict[str, Recipe]:
        return {r.id: r for r in self.list_recipes()}

    def add_recipe(self, recipe: Recipe) -> Recipe:
        """Store a new recipe, assigning an id and timestamps when missing."""
        raw = self._load_raw()
        now = datetime.now(timezone.utc)
        if not recipe.id:
            recipe.id = str(uuid.uuid4())
        elif any(str(entry.get("id", "")) == recipe.id for entry in raw):
            raise CatalogError(f"Recipe with id '{recipe.id}' already exists")
        recipe.created_at = recipe.created_at or now
        recipe.updated_at = now
        raw.insert(0, recipe.to_dict())  # newest first, like the cookbook listing
        self._write_raw(raw)
        logger.info("Added recipe %s (%s)", recipe.id, recipe.name)
        return recipe

    def update_recipe(self, recipe_id: str, changes: dict) -> Recipe:
        raw = self._load_raw()
        for i, entry in enumerate(raw):
            if str(entry.get("id", "")) == recipe_id:
                merged = {**entry, **{k: v for k, v in changes.items() if v is not None}}
                merged["id"] = recipe_id
                merged["updatedAt"] = datetime.now(timezone.utc).isoformat()
                recipe = Recipe.from_dict(merged)
                raw[i] = recipe.to_dict()
                self._write_raw(raw)
                return recipe
        raise RecipeNotFound(recipe_id)

    def delete_recipe(self, recipe_id: str) -> None:
        raw = self._load_raw()
        kept = [entry for entry in raw if str(entry.get("id", "")) != recipe_id]
        if len(kept) == len(raw):
            raise RecipeNotFound(recipe_id)
        self._write_raw(kept)
        logger.info("Deleted recipe %s", recipe_id)

    def search(self, query: str = "", tags: Optional[List[str]] = None,
               max_prep_time: Optional[int] = None, max_cook_time: Optional[int] = None) -> List[Recipe]:
        return [r for r in self.list_recipes() if r.matches(query, tags, max_prep_time, max_cook_time)]

    def all_tags(self) -> List[str]:
        tags = set()
        for recipe in self.list_recipes():
            tags.update(recipe.tags)
        return sorted(tags)
