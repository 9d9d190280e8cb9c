"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest
from openai import AsyncOpenAI

from nutriempower.adapters.ollama_chat_client import OllamaChatClient
from nutriempower.adapters.usda_dataset_client import HttpxUsdaDatasetClient
from nutriempower.domain.chat import ChatBackendError
from nutriempower.services.cache import ResponseCache
from nutriempower.services.chat import BACKEND_UNAVAILABLE_MESSAGE, ChatService
from nutriempower.services.dataset import FoodDataset
from nutriempower.services.limiter import ConcurrencyLimiter


def _ollama_client(handler) -> OllamaChatClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return OllamaChatClient(
        client=AsyncOpenAI(
            base_url="http://ollama.test/v1",
            api_key="ollama",
            max_retries=0,
            http_client=httpx.AsyncClient(transport=transport),
        )
    )


def _completion(content: str | None) -> dict[str, object]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "llama3.2",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def test_ollama_client_sends_system_and_user_turns() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/chat/completions")
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(200, json=_completion("Try lentils."))

    client = _ollama_client(handler)

    text = asyncio.run(
        client.complete(
            model="llama3.2",
            system_prompt="Be brief.",
            user_content="Protein ideas?",
            max_tokens=64,
        )
    )

    assert text == "Try lentils."
    payload = seen[0]
    assert payload["model"] == "llama3.2"
    assert payload["max_tokens"] == 64
    assert payload["messages"] == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "Protein ideas?"},
    ]


def test_ollama_client_returns_none_without_choices() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _completion(None)
        payload["choices"] = []
        return httpx.Response(200, json=payload)

    client = _ollama_client(handler)

    text = asyncio.run(
        client.complete(
            model="llama3.2", system_prompt="s", user_content="u", max_tokens=8
        )
    )

    assert text is None


def test_refused_connection_maps_to_backend_down_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    service = ChatService(
        client=_ollama_client(handler),
        dataset=FoodDataset("missing.csv", "missing.json", records=[]),
        cache=ResponseCache(),
        limiter=ConcurrencyLimiter(),
        model="llama3.2",
    )

    with pytest.raises(ChatBackendError) as excinfo:
        asyncio.run(service.reply("hello"))

    assert str(excinfo.value) == BACKEND_UNAVAILABLE_MESSAGE


def test_usda_dataset_client_downloads_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith(".zip")
        return httpx.Response(200, content=b"zip-bytes")

    transport = httpx.MockTransport(handler)
    client = HttpxUsdaDatasetClient(http_client=httpx.AsyncClient(transport=transport))

    data = asyncio.run(client.download("https://fdc.test/foods.zip"))

    assert data == b"zip-bytes"


def test_usda_dataset_client_raises_on_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    client = HttpxUsdaDatasetClient(http_client=httpx.AsyncClient(transport=transport))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.download("https://fdc.test/foods.zip"))
