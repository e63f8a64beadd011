import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from mealcal.api import api_ai
from mealcal.api.api_run import create_app
from mealcal.domain.Errors import GenerationError, InvalidArgument


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content)))


RECIPE_JSON = json.dumps({
    "name": "Lemon Chicken",
    "description": "Bright weeknight chicken",
    "prepTime": 10,
    "cookTime": 25,
    "servings": 2,
    "ingredients": [{"name": "Chicken thighs", "amount": "4", "unit": ""}],
    "steps": ["Season", "Roast"],
    "nutrition": {"calories": 450, "protein": 38, "carbs": 6, "fat": 28},
    "tags": ["dinner"],
})


class TestParseRecipeJson(unittest.TestCase):

    def test_plain_json(self):
        self.assertEqual(api_ai.parse_recipe_json('{"name": "Soup"}'), {"name": "Soup"})

    def test_fenced_json_with_trailing_commas(self):
        text = 'Here you go:\n```json\n{"name": "Soup", "tags": ["lunch",],}\n```'
        self.assertEqual(api_ai.parse_recipe_json(text), {"name": "Soup", "tags": ["lunch"]})

    def test_json_embedded_in_prose(self):
        text = 'Sure! {"name": "Curry {spicy}", "servings": 2} Enjoy.'
        self.assertEqual(api_ai.parse_recipe_json(text), {"name": "Curry {spicy}", "servings": 2})

    def test_not_json(self):
        self.assertIsNone(api_ai.parse_recipe_json("A lovely plate of pasta."))
        self.assertIsNone(api_ai.parse_recipe_json(""))
        self.assertIsNone(api_ai.parse_recipe_json("[1, 2, 3]"))


class TestGenerateRecipe(unittest.TestCase):

    def test_text_generation(self):
        client = fake_client(RECIPE_JSON)
        with patch.object(api_ai, '_get_openai_client', return_value=client):
            recipe = api_ai.generate_recipe_from_text("something with lemon")
        self.assertEqual(recipe.name, "Lemon Chicken")
        self.assertTrue(recipe.id.startswith("generated-"))
        self.assertEqual(recipe.get_calories(), 450)
        call = client.chat.completions.calls[0]
        self.assertEqual(call["response_format"], {"type": "json_object"})
        self.assertIn("something with lemon", call["messages"][-1]["content"])

    def test_text_generation_without_key(self):
        with patch.object(api_ai, '_get_openai_client', return_value=None):
            with self.assertRaises(GenerationError):
                api_ai.generate_recipe_from_text("pasta")

    def test_text_generation_rejects_garbage(self):
        with patch.object(api_ai, '_get_openai_client', return_value=fake_client("no recipe today")):
            with self.assertRaises(GenerationError):
                api_ai.generate_recipe_from_text("pasta")

    def test_empty_prompt(self):
        with self.assertRaises(InvalidArgument):
            api_ai.generate_recipe_from_text("   ")

    def test_photo_generation_falls_back_to_description(self):
        client = fake_client("Looks like a margherita pizza with basil.")
        with patch.object(api_ai, '_get_openai_client', return_value=client):
            recipe = api_ai.generate_recipe_from_photo(b"\x89PNG...", "image/png")
        self.assertEqual(recipe.name, "Recipe from Image")
        self.assertEqual(recipe.description, "Looks like a margherita pizza with basil.")
        self.assertEqual(recipe.tags, ["photo-generated"])
        image_part = client.chat.completions.calls[0]["messages"][0]["content"][1]
        self.assertTrue(image_part["image_url"]["url"].startswith("data:image/png;base64,"))

    def test_photo_generation_validates_input(self):
        with self.assertRaises(InvalidArgument):
            api_ai.generate_recipe_from_photo(b"", "image/png")
        with self.assertRaises(InvalidArgument):
            api_ai.generate_recipe_from_photo(b"%PDF", "application/pdf")


class TestGenerationEndpoints(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(create_app())

    def test_generate_text_endpoint(self):
        with patch.object(api_ai, '_get_openai_client', return_value=fake_client(RECIPE_JSON)):
            resp = self.client.post('/api/recipes/generate/text', json={"prompt": "lemon chicken"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["recipe"]["name"], "Lemon Chicken")

    def test_generate_text_without_key_is_502(self):
        with patch.object(api_ai, '_get_openai_client', return_value=None):
            resp = self.client.post('/api/recipes/generate/text', json={"prompt": "lemon chicken"})
        self.assertEqual(resp.status_code, 502)

    def test_generate_photo_rejects_non_image(self):
        resp = self.client.post('/api/recipes/generate/photo',
                                files={"file": ("notes.txt", b"hello", "text/plain")})
        self.assertEqual(resp.status_code, 400)


@pytest.mark.asyncio
async def test_generate_photo_endpoint_async(tmp_path):
    app = create_app(data_dir=tmp_path)
    with patch.object(api_ai, '_get_openai_client', return_value=fake_client(RECIPE_JSON)):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.post('/api/recipes/generate/photo',
                                 files={"file": ("dish.jpg", b"\xff\xd8\xff", "image/jpeg")})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["recipe"]["name"] == "Lemon Chicken"
    assert [s["instruction"] for s in data["recipe"]["steps"]] == ["Season", "Roast"]
