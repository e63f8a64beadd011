"""Recipe value type: the opaque unit scheduled into meal slots.

The meal plan only ever reads ``id`` (and ``name`` for display); every other
field belongs to the cookbook and travels with the object untouched.
"""
from datetime import datetime
from typing import List, Dict, Optional
from mealcal.domain.Ingredient import Ingredient


class RecipeStep:
    def __init__(self, number: int, instruction: str):
        self.number = number
        self.instruction = instruction

    def __str__(self) -> str:
        return f"{self.number}. {self.instruction}"

    __repr__ = __str__

    def to_dict(self):
        return {"number": self.number, "instruction": self.instruction}


class Nutrition:
    """Per-serving nutrition; grams for macros."""

    def __init__(self, calories: int = 0, protein: int = 0, carbs: int = 0, fat: int = 0):
        self.calories = calories or 0
        self.protein = protein or 0
        self.carbs = carbs or 0
        self.fat = fat or 0

    @staticmethod
    def from_dict(data):
        if not isinstance(data, dict):
            return None
        return Nutrition(
            calories=data.get("calories", 0),
            protein=data.get("protein", 0),
            # Normalize key synonyms
            carbs=data.get("carbs", data.get("carbohydrates", 0)),
            fat=data.get("fat", data.get("fats", 0)),
        )

    def to_dict(self):
        return {"calories": self.calories, "protein": self.protein, "carbs": self.carbs, "fat": self.fat}


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _parse_steps(raw) -> List[RecipeStep]:
    steps: List[RecipeStep] = []
    for index, item in enumerate(raw or [], start=1):
        if isinstance(item, RecipeStep):
            steps.append(item)
        elif isinstance(item, dict):
            instruction = str(item.get("instruction", "") or "").strip()
            if instruction:
                steps.append(RecipeStep(int(item.get("number") or item.get("step_number") or index), instruction))
        elif isinstance(item, str) and item.strip():
            steps.append(RecipeStep(index, item.strip()))
    return steps


class Recipe:
    def __init__(self, id: str = "", name: str = "", description: str = "",
                 ingredients: Optional[List[Ingredient]] = None, steps: Optional[List[RecipeStep]] = None,
                 prep_time: int = 0, cook_time: int = 0, servings: int = 0,
                 nutrition: Optional[Nutrition] = None, tags: Optional[List[str]] = None,
                 image_url: Optional[str] = None, created_at: Optional[datetime] = None,
                 updated_at: Optional[datetime] = None):
        self.id = id
        self.name = name
        self.description = description or ""
        self.ingredients = ingredients[:] if ingredients else []
        self.steps = steps[:] if steps else []
        self.prep_time = prep_time or 0
        self.cook_time = cook_time or 0
        self.servings = servings or 0
        self.nutrition = nutrition
        self.tags = tags[:] if tags else []
        self.image_url = image_url
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.name} [{self.id}] - {self.servings} servings - {self.total_time}m - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    @property
    def total_time(self) -> int:
        return (self.prep_time or 0) + (self.cook_time or 0)

    def get_calories(self): return self.nutrition.calories if self.nutrition else 0
    def get_protein(self): return self.nutrition.protein if self.nutrition else 0
    def get_carbs(self): return self.nutrition.carbs if self.nutrition else 0
    def get_fat(self): return self.nutrition.fat if self.nutrition else 0

    def matches(self, query: str = "", tags: Optional[List[str]] = None,
                max_prep_time: Optional[int] = None, max_cook_time: Optional[int] = None) -> bool:
        """Return True if the recipe passes every given filter.

        ``query`` is matched case-insensitively against name, description and
        tags; every tag in ``tags`` must be present on the recipe.
        """
        if query:
            q = query.lower()
            haystack = [self.name.lower(), self.description.lower()] + [t.lower() for t in self.tags]
            if not any(q in h for h in haystack):
                return False
        if tags and not all(t in self.tags for t in tags):
            return False
        if max_prep_time and self.prep_time > max_prep_time:
            return False
        if max_cook_time and self.cook_time > max_cook_time:
            return False
        return True

    @staticmethod
    def from_dict(data):
        """Build a Recipe from camelCase (API / AI output) or snake_case (storage) keys."""
        d = dict(data)
        return Recipe(
            id=str(d.get("id", "") or ""),
            name=str(d.get("name", "") or "").strip(),
            description=d.get("description", ""),
            ingredients=[Ingredient.from_dict(ing) for ing in d.get("ingredients", []) or []],
            steps=_parse_steps(d.get("steps", d.get("recipe_steps"))),
            prep_time=int(d.get("prepTime", d.get("prep_time", 0)) or 0),
            cook_time=int(d.get("cookTime", d.get("cook_time", 0)) or 0),
            servings=int(d.get("servings", 0) or 0),
            nutrition=Nutrition.from_dict(d.get("nutrition")),
            tags=[str(t) for t in d.get("tags", []) or []],
            image_url=d.get("imageUrl", d.get("image_url")),
            created_at=_parse_timestamp(d.get("createdAt", d.get("created_at"))),
            updated_at=_parse_timestamp(d.get("updatedAt", d.get("updated_at"))),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "steps": [step.to_dict() for step in self.steps],
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "nutrition": self.nutrition.to_dict() if self.nutrition else None,
            "tags": self.tags,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary(self) -> Dict:
        """Compact form used inside meal slots (the fields a calendar cell shows)."""
        return {
            "id": self.id,
            "name": self.name,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "imageUrl": self.image_url,
            "tags": self.tags,
        }
