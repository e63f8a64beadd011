"""Recipe image lookup through the Unsplash search API."""
import logging
from typing import Optional

import httpx

from mealcal.domain.Errors import CatalogError
from mealcal.utilities import config

logger = logging.getLogger(__name__)

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"


async def search_recipe_image(recipe_name: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> Optional[dict]:
    """Return the first landscape photo for ``recipe_name`` or None if nothing matched.

    Raises CatalogError when the key is missing or Unsplash cannot be reached.
    """
    if not config.UNSPLASH_ACCESS_KEY:
        raise CatalogError("UNSPLASH_ACCESS_KEY is not configured")

    params = {"query": f"{recipe_name} food dish", "per_page": 1, "orientation": "landscape"}
    headers = {"Authorization": f"Client-ID {config.UNSPLASH_ACCESS_KEY}"}
    try:
        async with httpx.AsyncClient(timeout=config.UNSPLASH_TIMEOUT, transport=transport) as client:
            response = await client.get(UNSPLASH_SEARCH_URL, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as e:
        logger.error("Unsplash lookup for %r failed: %s", recipe_name, e)
        raise CatalogError(f"Unsplash API error: {e}") from e

    results = (data.get("results") if isinstance(data, dict) else None) or []
    if not results:
        logger.info("No Unsplash images for %r", recipe_name)
        return None
    image = results[0] or {}
    urls = image.get("urls") or {}
    if not urls.get("regular"):
        logger.info("Unsplash result for %r carries no image URL", recipe_name)
        return None
    user = image.get("user") or {}
    return {
        "imageUrl": urls["regular"],
        "thumbnailUrl": urls.get("small") or urls["regular"],
        "description": image.get("alt_description"),
        "photographer": user.get("name"),
        "photographerUrl": (user.get("links") or {}).get("html"),
    }
