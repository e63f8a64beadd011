"""Meal plan endpoints: week view, slot assignment, custom meal types."""
import logging
from datetime import date as _date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response

from mealcal.domain.Errors import InvalidArgument
from mealcal.domain.MealPlanStore import MealPlanStore, normalize_meal_type
from mealcal.domain.Week import week_window
from mealcal.infra.pdf_utils import generate_pdf_for_week
from mealcal.logic.reporting.nutrition import compute_week_nutrition
from mealcal.utilities.constants import MEAL_TYPE_OPTIONS
from mealcal.utilities.validators import SlotAssignmentInput, CustomMealTypeInput

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(request: Request) -> MealPlanStore:
    return request.app.state.meal_plan


def _persist(request: Request):
    request.app.state.plan_repository.save(_store(request))


def _anchor(anchor: Optional[str]):
    return anchor if anchor else _date.today()


def build_week_view(store: MealPlanStore, anchor) -> dict:
    """Everything a calendar needs to render one week."""
    window = week_window(anchor)
    days = []
    for day in window.days:
        meal_types = store.meal_types_for_date(day)
        slots = {s.meal_type: [r.to_summary() for r in s.recipes] for s in store.slots_for_date(day)}
        days.append({
            "date": day.isoformat(),
            "weekday": day.strftime("%A"),
            "mealTypes": meal_types,
            "customMealTypes": store.custom_meal_types(day),
            "slots": slots,
        })
    return {
        "weekStart": window.start.isoformat(),
        "weekEnd": window.end.isoformat(),
        "label": window.label,
        "isCurrent": window.is_current(),
        "previous": window.previous().start.isoformat(),
        "next": window.next().start.isoformat(),
        "mealTypeOptions": list(MEAL_TYPE_OPTIONS),
        "days": days,
    }


@router.get("/api/meal-plan/week")
def get_week(request: Request, anchor: Optional[str] = Query(default=None, description="Any date in the week (YYYY-MM-DD)")):
    return build_week_view(_store(request), _anchor(anchor))


@router.get("/api/meal-plan/slot")
def get_slot(request: Request, date: str = Query(...), meal_type: str = Query(..., alias="mealType")):
    slot = _store(request).find_slot(date, meal_type)
    if slot is None:
        raise HTTPException(status_code=404, detail="No recipe assigned to this slot")
    return slot.to_dict()


@router.post("/api/meal-plan/slots")
def add_recipe_to_slot(request: Request, payload: SlotAssignmentInput):
    store = _store(request)
    meal_type = normalize_meal_type(payload.meal_type)
    # custom labels must be registered for the date before they can be scheduled
    if meal_type not in store.meal_types_for_date(payload.date):
        raise InvalidArgument(f"Meal type '{meal_type}' is not registered for {payload.date}", field="meal_type")
    recipe = request.app.state.catalog.get_recipe(payload.recipe_id)
    slot = store.add_recipe(payload.date, meal_type, recipe)
    _persist(request)
    logger.info("Assigned %s to %s", recipe.id, slot.id)
    return {"success": True, "message": "Recipe added to meal plan successfully", "slot": slot.to_dict()}


@router.delete("/api/meal-plan/slots")
def remove_recipe_from_slot(request: Request, date: str = Query(...), meal_type: str = Query(..., alias="mealType"),
                            recipe_id: str = Query(..., alias="recipeId")):
    store = _store(request)
    removed = store.remove_recipe(date, meal_type, recipe_id)
    if removed:
        _persist(request)
    slot = store.find_slot(date, meal_type)
    return {
        "success": True,
        "removed": removed,
        "slot": slot.to_dict() if slot else None,
    }


@router.get("/api/meal-plan/meal-types")
def get_meal_types(request: Request, date: str = Query(...)):
    store = _store(request)
    return {
        "date": date,
        "mealTypes": store.meal_types_for_date(date),
        "customMealTypes": store.custom_meal_types(date),
    }


@router.post("/api/meal-plan/meal-types")
def register_meal_type(request: Request, payload: CustomMealTypeInput):
    store = _store(request)
    added = store.register_custom_meal_type(payload.date, payload.label)
    if added:
        _persist(request)
    return {"added": added, "mealTypes": store.meal_types_for_date(payload.date)}


@router.delete("/api/meal-plan/meal-types/{date}/{index}")
def unregister_meal_type(request: Request, date: str, index: int):
    store = _store(request)
    label = store.unregister_custom_meal_type(date, index)
    if label is not None:
        _persist(request)
    return {"removed": label, "mealTypes": store.meal_types_for_date(date)}


@router.get("/api/meal-plan/nutrition")
def get_week_nutrition(request: Request, anchor: Optional[str] = Query(default=None)):
    return compute_week_nutrition(_store(request), _anchor(anchor))


@router.get("/api/meal-plan/rows")
def get_rows(request: Request):
    return {"rows": _store(request).to_rows()}


@router.get("/export_pdf")
def export_pdf(request: Request, anchor: Optional[str] = Query(default=None)):
    window = week_window(_anchor(anchor))
    pdf_bytes = generate_pdf_for_week(_store(request), window.start)
    filename = f"meal_plan_{window.start.isoformat()}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
