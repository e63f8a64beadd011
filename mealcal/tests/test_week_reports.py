import unittest

from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.domain.Recipe import Recipe, Nutrition
from mealcal.events.Event_Bus import EventBus
from mealcal.infra.pdf_utils import generate_pdf_for_week, week_meal_types
from mealcal.logic.reporting.nutrition import compute_week_nutrition


class TestWeekReports(unittest.TestCase):

    def setUp(self):
        self.store = MealPlanStore(duplicate_policy="allow", unregister_policy="orphan", event_bus=EventBus())
        self.oats = Recipe(id="oats", name="Overnight Oats", nutrition=Nutrition(300, 10, 45, 8))
        self.salad = Recipe(id="salad", name="Salad", nutrition=Nutrition(200, 5, 10, 15))
        self.toast = Recipe(id="toast", name="Toast")

    def test_nutrition_sums_slots_days_and_week(self):
        self.store.add_recipe("2024-01-15", "breakfast", self.oats)
        self.store.add_recipe("2024-01-15", "breakfast", self.toast)
        self.store.add_recipe("2024-01-15", "lunch", self.salad)
        self.store.add_recipe("2024-01-20", "lunch", self.salad)
        # outside the week
        self.store.add_recipe("2024-01-22", "lunch", self.salad)

        report = compute_week_nutrition(self.store, "2024-01-17")
        self.assertEqual(report["weekStart"], "2024-01-15")
        self.assertEqual(len(report["days"]), 7)
        monday = report["days"]["2024-01-15"]
        self.assertEqual(monday["calories"], 500)
        self.assertEqual(monday["meals"]["breakfast"]["recipes"], ["Overnight Oats", "Toast"])
        self.assertEqual(monday["meals"]["breakfast"]["calories"], 300)
        self.assertEqual(report["days"]["2024-01-16"]["meals"], {})
        self.assertEqual(report["week_totals"], {"calories": 700, "protein": 20, "carbs": 65, "fat": 38})

    def test_pdf_columns_include_custom_and_orphaned_types(self):
        self.store.register_custom_meal_type("2024-01-16", "snack")
        self.store.add_recipe("2024-01-18", "late night", self.toast)
        self.assertEqual(week_meal_types(self.store, "2024-01-17"),
                         ["breakfast", "lunch", "dinner", "snack", "late night"])

    def test_pdf_bytes(self):
        self.store.add_recipe("2024-01-17", "dinner", self.salad)
        pdf = generate_pdf_for_week(self.store, "2024-01-17")
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 500)


if __name__ == '__main__':
    unittest.main()
