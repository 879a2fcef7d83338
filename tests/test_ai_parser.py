import pytest

from conftest import FakeCompletionClient, ai_recipe_json
from recipe_pipeline.exceptions import AiMalformedResponse, AiSchemaInvalid, AiUnavailable
from recipe_pipeline.parsers.ai_parser import (
    AIRecipeParser,
    decode_ai_payload,
    recipe_from_payload,
    request_completion,
    strip_code_fences,
)
from recipe_pipeline.parsers.prompts import SYSTEM_PROMPT


def test_parse_recipe_with_ai() -> None:
    client = FakeCompletionClient(ai_recipe_json())
    got = AIRecipeParser(client).parse_recipe("Pancakes ...")
    assert got.name == "Pancakes"
    assert [(i.quantity, i.unit, i.name) for i in got.ingredients] == [
        (1.5, "cup", "flour"),
        (2.0, "piece", "eggs"),
    ]
    assert got.yield_quantity == 4
    assert got.prep_time_minutes == 10
    assert client.systems == [SYSTEM_PROMPT]
    assert "Pancakes ..." in client.prompts[0]


def test_fenced_response() -> None:
    client = FakeCompletionClient("Here you go:\n```json\n" + ai_recipe_json() + "\n```")
    got = AIRecipeParser(client).parse_recipe("text")
    assert got.name == "Pancakes"


def test_strip_code_fences() -> None:
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences(' {"a": 1} ') == '{"a": 1}'


def test_without_client() -> None:
    with pytest.raises(AiUnavailable):
        AIRecipeParser(None).parse_recipe("text")


def test_long_text_is_truncated() -> None:
    client = FakeCompletionClient(ai_recipe_json())
    AIRecipeParser(client, max_text_length=10).parse_recipe("x" * 10 + "TRUNCATED")
    assert "x" * 10 in client.prompts[0]
    assert "TRUNCATED" not in client.prompts[0]


@pytest.mark.parametrize("response", ("not json", "", "```json\n{broken\n```"))
def test_malformed_response(response: str) -> None:
    with pytest.raises(AiMalformedResponse):
        decode_ai_payload(response)


@pytest.mark.parametrize(
    "response",
    (
        "[1, 2]",
        '{"ingredients": [{"name": "salt"}], "instructions": ["Mix."]}',
        '{"name": "X", "ingredients": [], "instructions": ["Mix."]}',
        '{"name": "X", "ingredients": [{"quantity": 2}], "instructions": ["Mix."]}',
        '{"name": "X", "ingredients": [{"name": "salt"}], "instructions": []}',
        '{"name": "X", "ingredients": [{"name": "salt"}], "instructions": ["  "]}',
        '{"name": " ", "ingredients": [{"name": "salt"}], "instructions": ["Mix."]}',
    ),
)
def test_schema_invalid_response(response: str) -> None:
    with pytest.raises(AiSchemaInvalid):
        decode_ai_payload(response)


def test_numbers_are_not_trusted() -> None:
    payload = decode_ai_payload(
        '{"name": "X", "instructions": ["Mix."], '
        '"ingredients": [{"name": "salt", "quantity": NaN, "unit": null}, '
        '{"name": "flour", "quantity": "1 1/2", "unit": "Cups"}, '
        '{"name": "sugar", "quantity": -2}], '
        '"yieldQuantity": Infinity, "prepTimeMinutes": -5, "cookTimeMinutes": "1 hour"}'
    )
    got = recipe_from_payload(payload)
    salt, flour, sugar = got.ingredients
    assert (salt.quantity, salt.unit) == (1.0, "piece")
    assert (flour.quantity, flour.unit) == (1.5, "cup")
    assert sugar.quantity == 1.0
    assert got.yield_quantity is None
    assert got.prep_time_minutes is None
    assert got.cook_time_minutes == 60


def test_snake_case_keys() -> None:
    payload = decode_ai_payload(ai_recipe_json(yieldQuantity=None, yield_quantity=6))
    assert recipe_from_payload(payload).yield_quantity == 6


def test_request_completion_maps_connection_errors() -> None:
    client = FakeCompletionClient(ConnectionError("refused"))
    with pytest.raises(AiUnavailable):
        request_completion(client, "prompt", "system")
