import re
import json
import time
import base64
import logging
from json import JSONDecodeError
from typing import Optional
from openai import OpenAI, OpenAIError
from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from mealcal.domain.Errors import GenerationError, InvalidArgument
from mealcal.domain.Recipe import Recipe
from mealcal.utilities import config
from mealcal.utilities.constants import TEXT_SYSTEM_PROMPT, PHOTO_PROMPT
from mealcal.utilities.validators import TextPromptInput

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def _get_openai_client() -> Optional[OpenAI]:
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not config.OPENAI_API_KEY:
        return None
    return OpenAI(api_key=config.OPENAI_API_KEY)


def _require_client() -> OpenAI:
    client = _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set; cannot generate recipes.")
        raise GenerationError("OPENAI_API_KEY is not configured")
    return client


def _generated_id() -> str:
    return f"generated-{int(time.time() * 1000)}"


# === Recipe Generation ===
def generate_recipe_from_text(prompt: str) -> Recipe:
    """Ask the model for a recipe matching ``prompt`` and return it as a Recipe."""
    if not prompt or not prompt.strip():
        raise InvalidArgument("Prompt must not be empty", field="prompt")
    client = _require_client()
    try:
        completion = client.chat.completions.create(
            model=config.OPENAI_TEXT_MODEL,
            messages=[
                {"role": "system", "content": TEXT_SYSTEM_PROMPT},
                {"role": "user", "content": f"Create a recipe for: {prompt.strip()}"},
            ],
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("Text recipe generation failed: %s", e)
        raise GenerationError(f"Recipe generation failed: {e}") from e

    content = (completion.choices[0].message.content or "").strip()
    parsed = parse_recipe_json(content)
    if parsed is None:
        logger.warning("AI output is not valid JSON and no JSON substring found")
        raise GenerationError("AI did not return a valid recipe")
    return _to_recipe(parsed)


def generate_recipe_from_photo(image_bytes: bytes, content_type: str = "image/jpeg") -> Recipe:
    """Describe the dish in the photo as a recipe.

    A reply that is not JSON is kept as the description of a placeholder
    "Recipe from Image" so the user still gets something to edit.
    """
    if not image_bytes:
        raise InvalidArgument("No file provided", field="file")
    if not (content_type or "").startswith("image/"):
        raise InvalidArgument("Invalid image type", field="file")
    client = _require_client()
    encoded = base64.b64encode(image_bytes).decode("ascii")
    try:
        completion = client.chat.completions.create(
            model=config.OPENAI_VISION_MODEL,
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": PHOTO_PROMPT},
                    {"type": "image_url", "image_url": {"url": f"data:{content_type};base64,{encoded}"}},
                ],
            }],
            max_tokens=config.OPENAI_MAX_TOKENS,
        )
    except OpenAIError as e:
        logger.error("Photo recipe generation failed: %s", e)
        raise GenerationError(f"Recipe generation failed: {e}") from e

    content = (completion.choices[0].message.content or "").strip()
    parsed = parse_recipe_json(content)
    if parsed is None:
        parsed = {
            "name": "Recipe from Image",
            "description": content,
            "prepTime": 30,
            "cookTime": 45,
            "servings": 4,
            "ingredients": [],
            "steps": [content or "Follow the description above"],
            "nutrition": {"calories": 0, "protein": 0, "carbs": 0, "fat": 0},
            "tags": ["photo-generated"],
        }
    return _to_recipe(parsed)


def _to_recipe(parsed: dict) -> Recipe:
    if not isinstance(parsed, dict) or not parsed.get("name"):
        raise GenerationError("AI did not return a valid recipe")
    recipe = Recipe.from_dict({**parsed, "id": _generated_id()})
    logger.info("Generated recipe %s (%s)", recipe.id, recipe.name)
    return recipe


# === Text Cleaning Helpers ===
def parse_recipe_json(text: str) -> Optional[dict]:
    """Decode a JSON object from model output, tolerating fences and trailing commas."""
    if not text:
        return None
    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    candidate = _extract_json_by_balancing(cleaned)
    if candidate:
        try:
            parsed = json.loads(_remove_trailing_commas(candidate))
            return parsed if isinstance(parsed, dict) else None
        except JSONDecodeError:
            logger.debug("Failed to decode extracted JSON from AI output")
    return None


def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    """Remove common trailing commas in JSON-like text to help json.loads succeed."""
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if ch == '"' and not escape:
            in_string = not in_string
        if in_string and ch == "\\" and not escape:
            escape = True
            continue
        else:
            escape = False

        if not in_string:
            if ch in "{[":
                if start is None:
                    start = i
                stack.append(ch)
            elif ch in "}]":
                if not stack:
                    continue
                opening = stack.pop()
                if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                    return None
                if not stack and start is not None:
                    return text[start:i + 1]
    return None


# === FastAPI Endpoints ===
router = APIRouter(prefix="/api/recipes/generate", tags=["generation"])


@router.post("/text")
def generate_text(payload: TextPromptInput):
    recipe = generate_recipe_from_text(payload.prompt)
    return {"success": True, "recipe": recipe.to_dict()}


@router.post("/photo")
async def generate_photo(file: UploadFile = File(...)):
    image_bytes = await file.read()
    recipe = await run_in_threadpool(generate_recipe_from_photo, image_bytes, file.content_type or "")
    return {"success": True, "recipe": recipe.to_dict()}
