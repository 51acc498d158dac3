"""OpenAI Responses API client for text completions."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_parser.services.parser import CompletionClient, CompletionOptions

WEB_SEARCH_TOOL: dict[str, str] = {"type": "web_search_preview"}


@dataclass
class OpenAICompletionClient(CompletionClient):
    """Completion client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAICompletionClient":
        """Create an OpenAI completion client that never retries."""
        return cls(client=AsyncOpenAI(api_key=api_key, max_retries=0))

    async def complete(
        self, *, prompt: str, message: str, options: CompletionOptions
    ) -> dict[str, object]:
        """Call OpenAI Responses API and return the response as JSON data."""
        request_payload: dict[str, object] = {
            "model": options.model,
            "input": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": message},
            ],
            "temperature": options.temperature,
            "max_output_tokens": options.max_output_tokens,
        }
        if options.use_search:
            request_payload["tools"] = [WEB_SEARCH_TOOL]

        response = await self.client.responses.create(**request_payload)
        return response.model_dump(mode="json")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
