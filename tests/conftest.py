"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from nutrition_parser.api.app import create_app
from nutrition_parser.config import Settings
from nutrition_parser.containers import AppContainer
from nutrition_parser.services.parser import (
    CompletionClient,
    CompletionOptions,
    ParserService,
)


def responses_payload(*texts: str) -> dict[str, object]:
    """Build a Responses API payload with one message holding the given parts."""
    return {
        "output": [
            {"type": "web_search_call", "status": "completed"},
            {
                "type": "message",
                "content": [{"type": "output_text", "text": text} for text in texts],
            },
        ]
    }


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client returning a canned reply and recording calls."""

    text: str = '{"name": "Greek yogurt", "calories": 59}'
    payload: dict[str, object] | None = None
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self, *, prompt: str, message: str, options: CompletionOptions
    ) -> dict[str, object]:
        self.calls.append({"prompt": prompt, "message": message, "options": options})
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            return self.payload
        return responses_payload(self.text)


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key", allow_origins="*")


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def parser_service(
    settings: Settings, completion_client: FakeCompletionClient
) -> ParserService:
    return ParserService(
        client=completion_client,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_output_tokens=settings.openai_max_output_tokens,
    )


@pytest.fixture
def container(settings: Settings, parser_service: ParserService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        parser_service=parser_service,
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
