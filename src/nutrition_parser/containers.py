"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_parser.adapters.openai_completion_client import OpenAICompletionClient
from nutrition_parser.config import Settings
from nutrition_parser.services.parser import ParserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    parser_service: ParserService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = OpenAICompletionClient.create(resolved_settings.openai_api_key)
    parser_service = ParserService(
        client=openai_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        max_output_tokens=resolved_settings.openai_max_output_tokens,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        parser_service=parser_service,
        close_resources=close_resources,
    )
