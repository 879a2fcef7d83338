import json
from typing import Any

import pytest

from recipe_pipeline.models import ParsedIngredient, ParsedRecipe

COOKIES_TEXT = """Chocolate Chip Cookies

Ingredients:
2 1/4 cups all-purpose flour
1 tsp baking soda
1 cup unsalted butter, softened
2 large eggs
2 cups chocolate chips

Instructions:
1. Preheat oven to 375°F
2. Cream butter and sugar until fluffy
3. Bake for 9-11 minutes
"""

LASAGNA_TEXT = """ULTIMATE BEEF LASAGNA

Description:
Layers of rich meat sauce and creamy béchamel.

YIELD: 8 servings

PREP TIME: 45 minutes
COOK TIME: 1 hour 30 minutes

INGREDIENTS:

For the Meat Sauce:
2 tbsp olive oil
1 lb ground beef
Salt and pepper to taste

For the Béchamel:
4 tbsp butter
3 cups milk, warmed

DIRECTIONS:
1. Brown the beef in the olive oil.
2. Whisk the butter and milk into a sauce.
3. Layer and bake for 45 minutes.

NOTES:
- Make ahead and refrigerate for up to 24 hours.
"""

APPLE_PIE_TEXT = """GRANDMA'S APPLE PIE

A family recipe.

8 Granny Smith apples
3/4 cup sugar
1 tsp cinnamon
A pinch of salt

First, peel and slice the apples thinly.
Then bake at 425°F for 45 minutes.
"""


class FakeCompletionClient:
    """Completion client that replays scripted responses.

    Each item is returned in order; exceptions are raised instead.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.systems: list[str | None] = []

    def complete(self, prompt: str, *, system: str | None = None) -> str:
        self.prompts.append(prompt)
        self.systems.append(system)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def ai_recipe_json(**overrides: Any) -> str:
    payload = {
        "name": "Pancakes",
        "description": "Fluffy pancakes",
        "ingredients": [
            {"quantity": 1.5, "unit": "cups", "name": "flour"},
            {"quantity": 2, "unit": "", "name": "eggs"},
        ],
        "instructions": ["Mix everything.", "Fry in a pan."],
        "yieldQuantity": 4,
        "yieldUnit": "servings",
        "prepTimeMinutes": 10,
        "cookTimeMinutes": 15,
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def simple_recipe() -> ParsedRecipe:
    return ParsedRecipe(
        name="Simple Bake",
        ingredients=[
            ParsedIngredient(name="flour", quantity=1, unit="cup", id="flour"),
            ParsedIngredient(name="eggs", quantity=3, unit="piece", id=7),
        ],
        instructions=["Mix.", "Bake."],
        yield_quantity=4,
        yield_unit="servings",
    )
