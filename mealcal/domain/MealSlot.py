"""MealSlot: the recipes assigned to one (date, meal type) pair."""
from typing import List, Optional
from mealcal.domain.Recipe import Recipe


def slot_id(date: str, meal_type: str) -> str:
    return f"{date}-{meal_type}"


class MealSlot:
    def __init__(self, date: str, meal_type: str, recipes: Optional[List[Recipe]] = None):
        self.date = date
        self.meal_type = meal_type
        self.recipes: List[Recipe] = list(recipes) if recipes else []

    @property
    def id(self) -> str:
        return slot_id(self.date, self.meal_type)

    @property
    def key(self):
        return (self.date, self.meal_type)

    def recipe_ids(self) -> List[str]:
        return [r.id for r in self.recipes]

    def __len__(self) -> int:
        return len(self.recipes)

    def __str__(self) -> str:
        names = ", ".join(r.name or r.id for r in self.recipes) or "-"
        return f"{self.date} {self.meal_type}: {names}"

    __repr__ = __str__

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "mealType": self.meal_type,
            "recipes": [r.to_summary() for r in self.recipes],
        }
