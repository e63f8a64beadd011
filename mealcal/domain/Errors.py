"""Error types raised by the meal planning core and its collaborators.

InvalidArgument is the only error the MealPlanStore itself raises; the
others come from the recipe catalog and the AI generation layer and are
surfaced to the web layer as recoverable failures.
"""


class InvalidArgument(ValueError):
    """A date or meal type failed validation at the store boundary."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class RecipeNotFound(LookupError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe '{recipe_id}' not found")
        self.recipe_id = recipe_id


class CatalogError(RuntimeError):
    """Recipe catalog or image lookup could not be reached or read."""


class GenerationError(RuntimeError):
    """AI recipe generation failed or returned nothing usable."""


__all__ = ["InvalidArgument", "RecipeNotFound", "CatalogError", "GenerationError"]
