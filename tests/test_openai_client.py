"""Tests for the OpenAI completion adapter."""

import asyncio

from nutrition_parser.adapters.openai_completion_client import OpenAICompletionClient
from nutrition_parser.services.parser import CompletionOptions


class _FakeResponse:
    def model_dump(self, mode: str = "python") -> dict[str, object]:
        return {"output": [{"content": [{"text": '{"a": 1}'}]}]}


class _FakeResponses:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return _FakeResponse()


class _FakeOpenAI:
    def __init__(self) -> None:
        self.responses = _FakeResponses()


def _options(use_search: bool) -> CompletionOptions:
    return CompletionOptions(
        model="gpt-4o-mini",
        temperature=0.2,
        max_output_tokens=900,
        use_search=use_search,
    )


def test_openai_client_sends_transcript_with_search_tool() -> None:
    fake = _FakeOpenAI()
    client = OpenAICompletionClient(client=fake)

    result = asyncio.run(
        client.complete(prompt="Be a parser", message="milk", options=_options(True))
    )

    assert result == {"output": [{"content": [{"text": '{"a": 1}'}]}]}
    assert fake.responses.last_payload == {
        "model": "gpt-4o-mini",
        "input": [
            {"role": "system", "content": "Be a parser"},
            {"role": "user", "content": "milk"},
        ],
        "temperature": 0.2,
        "max_output_tokens": 900,
        "tools": [{"type": "web_search_preview"}],
    }


def test_openai_client_omits_tools_without_search() -> None:
    fake = _FakeOpenAI()
    client = OpenAICompletionClient(client=fake)

    asyncio.run(
        client.complete(prompt="Be a parser", message="milk", options=_options(False))
    )

    assert fake.responses.last_payload is not None
    assert "tools" not in fake.responses.last_payload


def test_create_disables_retries() -> None:
    client = OpenAICompletionClient.create("openai-key")

    assert client.client.max_retries == 0
    asyncio.run(client.close())
