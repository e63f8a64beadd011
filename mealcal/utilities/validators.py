"""
Input validation schemas using Pydantic for request bodies.

Dates and meal types are only checked for presence here; the MealPlanStore
is the validation boundary for their format and raises InvalidArgument.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class SlotAssignmentInput(BaseModel):
    """Schema for adding a recipe to a meal slot."""
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., min_length=1)
    meal_type: str = Field(..., min_length=1, alias="mealType")
    recipe_id: str = Field(..., min_length=1, alias="recipeId")


class CustomMealTypeInput(BaseModel):
    """Schema for registering a custom meal type on a date."""
    date: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=40)


class IngredientInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: str = ""
    unit: str = Field("", max_length=20)

    @field_validator('name', 'amount', 'unit', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; numbers become text amounts."""
        if isinstance(v, (int, float)):
            v = str(v)
        if isinstance(v, str):
            return v.strip()
        return v


class NutritionInput(BaseModel):
    calories: int = Field(0, ge=0)
    protein: int = Field(0, ge=0)
    carbs: int = Field(0, ge=0)
    fat: int = Field(0, ge=0)


class RecipeInput(BaseModel):
    """Schema for recipe input validation."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    ingredients: List[IngredientInput] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    prep_time: int = Field(0, ge=0, alias="prepTime")
    cook_time: int = Field(0, ge=0, alias="cookTime")
    servings: int = Field(1, ge=1, le=50)
    nutrition: Optional[NutritionInput] = None
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate recipe name."""
        if not v.strip():
            raise ValueError('Recipe name cannot be empty')
        return v.strip()

    @field_validator('steps')
    @classmethod
    def validate_steps(cls, v):
        """Filter out empty steps."""
        return [step.strip() for step in v if step and step.strip()]

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return [tag.strip() for tag in v if tag and tag.strip()]

    def to_recipe_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class RecipeUpdateInput(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    ingredients: Optional[List[IngredientInput]] = None
    steps: Optional[List[str]] = None
    prep_time: Optional[int] = Field(None, ge=0, alias="prepTime")
    cook_time: Optional[int] = Field(None, ge=0, alias="cookTime")
    servings: Optional[int] = Field(None, ge=1, le=50)
    nutrition: Optional[NutritionInput] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    def changes(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TextPromptInput(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=2000)
