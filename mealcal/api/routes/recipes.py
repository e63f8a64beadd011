"""Cookbook endpoints over the recipe catalog."""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from mealcal.domain.Recipe import Recipe
from mealcal.infra.image_search import search_recipe_image
from mealcal.utilities.validators import RecipeInput, RecipeUpdateInput

router = APIRouter()


def _catalog(request: Request):
    return request.app.state.catalog


@router.get("/api/recipes")
def list_recipes(request: Request):
    recipes = [r.to_dict() for r in _catalog(request).list_recipes()]
    return {
        "success": True,
        "recipes": recipes,
        "pagination": {"page": 1, "limit": len(recipes), "total": len(recipes)},
    }


# declared before /{recipe_id} so "search" is not read as an id
@router.get("/api/recipes/search")
def search_recipes(request: Request, query: str = Query(default=""),
                   tags: Optional[List[str]] = Query(default=None),
                   max_prep_time: Optional[int] = Query(default=None, alias="maxPrepTime"),
                   max_cook_time: Optional[int] = Query(default=None, alias="maxCookTime")):
    recipes = [r.to_dict() for r in _catalog(request).search(query, tags, max_prep_time, max_cook_time)]
    return {"success": True, "recipes": recipes, "total": len(recipes)}


@router.get("/api/recipes/tags")
def list_tags(request: Request):
    return {"tags": _catalog(request).all_tags()}


@router.get("/api/recipes/{recipe_id}")
def get_recipe(request: Request, recipe_id: str):
    return _catalog(request).get_recipe(recipe_id).to_dict()


@router.post("/api/recipes")
def create_recipe(request: Request, payload: RecipeInput):
    recipe = _catalog(request).add_recipe(Recipe.from_dict(payload.to_recipe_dict()))
    return {"id": recipe.id, "message": "Recipe created successfully", "recipe": recipe.to_dict()}


@router.put("/api/recipes/{recipe_id}")
def update_recipe(request: Request, recipe_id: str, payload: RecipeUpdateInput):
    recipe = _catalog(request).update_recipe(recipe_id, payload.changes())
    return {"success": True, "recipe": recipe.to_dict()}


@router.delete("/api/recipes/{recipe_id}")
def delete_recipe(request: Request, recipe_id: str):
    # Slots keep their copy of the recipe; the plan never cascades catalog deletes
    _catalog(request).delete_recipe(recipe_id)
    return {"message": "Recipe deleted successfully"}


@router.get("/api/images/unsplash")
async def unsplash_image(query: str = Query(default="")):
    if not query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")
    image = await search_recipe_image(query.strip())
    if image is None:
        return {"success": False, "message": "No images found for this query"}
    return {"success": True, **image}
