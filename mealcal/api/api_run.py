from fastapi import FastAPI, Request, Query
from fastapi.responses import JSONResponse

from pathlib import Path
from typing import Optional
import logging

from mealcal.api.api_ai import router as ai_router
from mealcal.api.routes import meal_plan, recipes
from mealcal.domain.Errors import InvalidArgument, RecipeNotFound, CatalogError, GenerationError
from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.events.Event_Bus import EventBus
from mealcal.events.web_observers import start as start_event_observers
from mealcal.infra.Plan_Repository import PlanRepository
from mealcal.infra.Recipe_Repository import RecipeRepository
from mealcal.infra.paths import RECIPES_FILE, PLAN_FILE, data_files

# Logging
logger = logging.getLogger("mealcal_app")


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(InvalidArgument)
    async def _invalid_argument(request: Request, exc: InvalidArgument):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(RecipeNotFound)
    async def _recipe_not_found(request: Request, exc: RecipeNotFound):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(CatalogError)
    async def _catalog_error(request: Request, exc: CatalogError):
        logger.error("Catalog failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"error": str(exc)})

    @app.exception_handler(GenerationError)
    async def _generation_error(request: Request, exc: GenerationError):
        logger.error("Generation failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"error": str(exc)})


def create_app(data_dir: Optional[Path] = None, store: Optional[MealPlanStore] = None) -> FastAPI:
    """Build the web app around one MealPlanStore.

    The store is owned by the app (``app.state.meal_plan``) and is loaded from
    the plan file once, then saved after every mutation.
    """
    if data_dir is not None:
        recipes_file, plan_file = data_files(data_dir)
    else:
        recipes_file, plan_file = RECIPES_FILE, PLAN_FILE

    app = FastAPI(title="Meal Calendar API")
    app.state.catalog = RecipeRepository(recipes_file)
    app.state.plan_repository = PlanRepository(plan_file)
    if store is None:
        store = MealPlanStore(event_bus=EventBus())
        app.state.plan_repository.load(store, app.state.catalog)
    app.state.meal_plan = store
    app.state.event_log = start_event_observers(store.event_bus)
    logger.info("Meal plan ready with %d slots", len(store))

    # Include routers
    app.include_router(meal_plan.router)
    app.include_router(recipes.router)
    app.include_router(ai_router)
    _register_error_handlers(app)

    @app.get("/api/events")
    def api_events(since: Optional[int] = Query(default=None)):
        return app.state.event_log.get_events(since)

    @app.get("/health")
    def health():
        return {"status": "ok", "slots": len(app.state.meal_plan)}

    return app


app = create_app()
