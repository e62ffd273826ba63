"""Tests for HTTP and OpenAI adapters."""

import asyncio
import json

import httpx
import pytest
from openai import AsyncOpenAI

from calorie_vita.adapters.openai_coach_client import OpenAICoachClient
from calorie_vita.adapters.openai_vision_client import OpenAIVisionClient
from calorie_vita.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


def test_get_product_requests_barcode_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": 1, "product": {"product_name": "Tea"}})

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        user_agent="CalorieVita/test",
    )

    payload = asyncio.run(client.get_product("12345678"))

    assert payload["product"] == {"product_name": "Tea"}
    assert str(seen[0].url) == "https://off.test/api/v0/product/12345678.json"
    assert seen[0].headers["User-Agent"] == "CalorieVita/test"


def test_get_product_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_product("12345678"))


def _openai_client(handler) -> AsyncOpenAI:  # type: ignore[no-untyped-def]
    return AsyncOpenAI(
        api_key="test-key",
        base_url="https://openai.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )


def _response_with_text(text: str) -> dict[str, object]:
    return {
        "id": "resp_1",
        "object": "response",
        "created_at": 0,
        "model": "gpt-4o-mini",
        "status": "completed",
        "parallel_tool_calls": False,
        "tool_choice": "auto",
        "tools": [],
        "output": [
            {
                "type": "message",
                "id": "msg_1",
                "role": "assistant",
                "status": "completed",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            }
        ],
    }


def test_coach_client_sends_conversation() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_response_with_text("Eat more beans."))

    client = OpenAICoachClient(_openai_client(handler))

    answer = asyncio.run(
        client.reply(
            model="gpt-4o-mini",
            store=False,
            instructions="Be a coach.",
            messages=[{"role": "user", "content": "Protein ideas?"}],
            max_output_tokens=200,
        )
    )

    assert answer == "Eat more beans."
    assert bodies[0]["instructions"] == "Be a coach."
    assert bodies[0]["input"] == [{"role": "user", "content": "Protein ideas?"}]
    assert bodies[0]["max_output_tokens"] == 200


def test_coach_client_rejects_empty_answer() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_response_with_text("  "))

    client = OpenAICoachClient(_openai_client(handler))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.reply(
                model="gpt-4o-mini",
                store=False,
                instructions="Be a coach.",
                messages=[{"role": "user", "content": "Hi"}],
                max_output_tokens=50,
            )
        )


def test_vision_client_parses_structured_output() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_response_with_text('{"items": []}'))

    client = OpenAIVisionClient(_openai_client(handler))

    result = asyncio.run(
        client.extract(
            model="gpt-4o-mini",
            store=False,
            image_data_url="data:image/jpeg;base64,AAAA",
            schema={"type": "object"},
            prompt="Identify food.",
        )
    )

    assert result == {"items": []}
    assert bodies[0]["text"]["format"]["name"] == "food_recognition"
