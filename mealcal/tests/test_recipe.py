import unittest
from datetime import datetime

from mealcal.domain.Ingredient import Ingredient
from mealcal.domain.Recipe import Recipe, RecipeStep, Nutrition


class TestRecipe(unittest.TestCase):

    def setUp(self):
        self.recipe_pancakes = Recipe(
            id="pancakes",
            name="Pancakes",
            description="Fluffy weekend pancakes",
            ingredients=[
                Ingredient("Flour", "200", "g"),
                Ingredient("Milk", "300", "ml"),
                Ingredient("Eggs", "2", ""),
            ],
            steps=[RecipeStep(1, "Mix ingredients"), RecipeStep(2, "Cook on skillet")],
            prep_time=10,
            cook_time=15,
            servings=4,
            nutrition=Nutrition(calories=500, protein=12, carbs=70, fat=14),
            tags=["breakfast", "vegetarian"],
        )

    def test_from_dict_accepts_camel_and_snake_case(self):
        camel = Recipe.from_dict({
            "id": "a", "name": " Soup ", "prepTime": 5, "cookTime": 20, "imageUrl": "http://img",
            "steps": ["Chop", "Boil"], "createdAt": "2024-01-17T10:00:00Z",
        })
        snake = Recipe.from_dict({
            "id": "b", "name": "Stew", "prep_time": 15, "cook_time": 60, "image_url": "http://img2",
            "recipe_steps": [{"step_number": 1, "instruction": "Brown meat"}],
        })
        self.assertEqual(camel.name, "Soup")
        self.assertEqual(camel.total_time, 25)
        self.assertEqual([s.instruction for s in camel.steps], ["Chop", "Boil"])
        self.assertEqual([s.number for s in camel.steps], [1, 2])
        self.assertIsInstance(camel.created_at, datetime)
        self.assertEqual(snake.prep_time, 15)
        self.assertEqual(snake.image_url, "http://img2")
        self.assertEqual(snake.steps[0].instruction, "Brown meat")

    def test_to_dict_uses_camel_case(self):
        data = self.recipe_pancakes.to_dict()
        self.assertEqual(data["prepTime"], 10)
        self.assertEqual(data["cookTime"], 15)
        self.assertEqual(data["nutrition"], {"calories": 500, "protein": 12, "carbs": 70, "fat": 14})
        self.assertEqual(data["steps"][1], {"number": 2, "instruction": "Cook on skillet"})
        self.assertEqual(Recipe.from_dict(data).ingredients, self.recipe_pancakes.ingredients)

    def test_summary_fields(self):
        summary = self.recipe_pancakes.to_summary()
        self.assertEqual(set(summary), {"id", "name", "prepTime", "cookTime", "servings", "imageUrl", "tags"})

    def test_nutrition_synonyms(self):
        n = Nutrition.from_dict({"calories": 100, "carbohydrates": 20, "fats": 3})
        self.assertEqual((n.carbs, n.fat), (20, 3))
        self.assertIsNone(Nutrition.from_dict(None))

    def test_matches(self):
        r = self.recipe_pancakes
        self.assertTrue(r.matches("pancake"))
        self.assertTrue(r.matches("FLUFFY"))
        self.assertTrue(r.matches("vegetarian"))
        self.assertFalse(r.matches("curry"))
        self.assertTrue(r.matches(tags=["breakfast", "vegetarian"]))
        self.assertFalse(r.matches(tags=["breakfast", "vegan"]))
        self.assertTrue(r.matches(max_prep_time=10, max_cook_time=15))
        self.assertFalse(r.matches(max_cook_time=10))

    def test_ingredient_amounts_are_text(self):
        ing = Ingredient.from_dict({"name": "Sugar", "amount": 2, "unit": "tbsp"})
        self.assertEqual(ing.amount, "2")
        self.assertEqual(str(ing), "2 tbsp Sugar")


if __name__ == '__main__':
    unittest.main()
