"""Nutrition aggregation for one week of the meal plan."""
from collections import defaultdict
from typing import Dict

from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.domain.Week import week_window

_FIELDS = ('calories', 'protein', 'carbs', 'fat')


def _recipe_nutrition(recipe) -> Dict[str, int]:
    n = getattr(recipe, 'nutrition', None)
    if n is None:
        return {k: 0 for k in _FIELDS}
    return {k: getattr(n, k, 0) or 0 for k in _FIELDS}


def compute_week_nutrition(store: MealPlanStore, anchor):
    """Aggregate per-serving nutrition for the week containing ``anchor``.

    Returns structure:
    {
      'weekStart': 'YYYY-MM-DD',
      'days': {
         'YYYY-MM-DD': {'calories': int, 'protein': g, 'carbs': g, 'fat': g,
                        'meals': {'breakfast': {'recipes': [names], 'calories': int, ...}, ...}},
         ...
      },
      'week_totals': {'calories': int, 'protein': g, 'carbs': g, 'fat': g}
    }
    Every recipe in a slot counts once; recipes without nutrition count as zero.
    """
    window = week_window(anchor)
    days_result = {}
    totals = defaultdict(int)

    for day in window.days:
        day_totals = defaultdict(int)
        meal_details = {}
        for slot in store.slots_for_date(day):
            slot_totals = defaultdict(int)
            for recipe in slot.recipes:
                for k, v in _recipe_nutrition(recipe).items():
                    slot_totals[k] += v
            meal_details[slot.meal_type] = {
                'recipes': [r.name for r in slot.recipes],
                **{k: slot_totals[k] for k in _FIELDS},
            }
            for k in _FIELDS:
                day_totals[k] += slot_totals[k]
        days_result[day.isoformat()] = {
            **{k: day_totals[k] for k in _FIELDS},
            'meals': meal_details,
        }
        for k in _FIELDS:
            totals[k] += day_totals[k]

    return {
        'weekStart': window.start.isoformat(),
        'days': days_result,
        'week_totals': {k: totals[k] for k in _FIELDS},
    }


__all__ = ["compute_week_nutrition"]
