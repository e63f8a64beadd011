from typing import Final

ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"
DAYS_IN_WEEK: Final[int] = 7

# Always available on every date, in this display order
DEFAULT_MEAL_TYPES: Final[tuple] = ("breakfast", "lunch", "dinner")

# Choices offered by the "add meal" picker
MEAL_TYPE_OPTIONS: Final[tuple] = (
    "breakfast",
    "brunch",
    "lunch",
    "snack",
    "dinner",
    "dessert",
    "late night",
)

DUPLICATE_POLICIES: Final[tuple] = ("allow", "dedupe")
UNREGISTER_POLICIES: Final[tuple] = ("orphan", "cascade")

MAX_PLAN_EVENTS: Final[int] = 300

RECIPE_JSON_FORMAT: Final[str] = (
    """
{
    "name": "Recipe Name",
    "description": "Brief description",
    "prepTime": 15,
    "cookTime": 30,
    "servings": 4,
    "ingredients": [
      {"name": "ingredient", "amount": "1", "unit": "cup"}
    ],
    "steps": ["Step 1 instruction", "Step 2 instruction"],
    "nutrition": {
      "calories": 250,
      "protein": 15,
      "carbs": 30,
      "fat": 8
    },
    "tags": ["tag1", "tag2"]
}
    """
)
TEXT_SYSTEM_PROMPT: Final[str] = (
    "You are a professional chef AI. Generate detailed recipes in JSON format with this exact structure:"
    + RECIPE_JSON_FORMAT
)
PHOTO_PROMPT: Final[str] = (
    "Analyze this food image and create a detailed recipe in JSON format with this exact structure:"
    + RECIPE_JSON_FORMAT
    + "Include estimated prep time, cook time, ingredients, steps, and nutrition."
)
