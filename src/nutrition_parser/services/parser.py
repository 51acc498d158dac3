"""Nutrition parsing service built on an LLM completion API."""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Protocol

from nutrition_parser.domain.nutrition import ParseMode, ParseRequest
from nutrition_parser.prompts import system_prompt

_logger = logging.getLogger(__name__)

_TOTAL_FIELDS = ("grams", "calories", "proteinGrams", "fatGrams", "carbGrams")
_OPENING_FENCE = re.compile(r"```[a-z]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")
# Falsy JSON values; an empty object or list still counts as totals.
_MISSING_TOTALS = (None, 0, "", False)


class ParserError(Exception):
    """Base error mapped to an HTTP error response."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body describing this error."""
        return {"error": self.message}


class InvalidRequestError(ParserError):
    """Request is missing fields or names an unknown mode."""

    status_code = 400


class UpstreamFormatError(ParserError):
    """Model reply does not contain a JSON object."""

    def __init__(self, raw: str, data: dict[str, object]) -> None:
        super().__init__("Response does not contain valid JSON")
        self.raw = raw
        self.data = data

    def to_payload(self) -> dict[str, object]:
        return {"error": self.message, "raw": self.raw, "data": self.data}


class UpstreamJSONError(ParserError):
    """Candidate JSON span in the model reply failed to parse."""

    def __init__(self, raw: str, json_text: str) -> None:
        super().__init__("Failed to parse JSON")
        self.raw = raw
        self.json_text = json_text

    def to_payload(self) -> dict[str, object]:
        return {"error": self.message, "raw": self.raw, "jsonText": self.json_text}


@dataclass(frozen=True)
class CompletionOptions:
    """Per-call upstream settings."""

    model: str
    temperature: float
    max_output_tokens: int
    use_search: bool


class CompletionClient(Protocol):
    """Interface for the upstream completion API."""

    async def complete(
        self, *, prompt: str, message: str, options: CompletionOptions
    ) -> dict[str, object]:
        """Send a system prompt and user message, return the raw response."""


@dataclass
class ParserService:
    """Service that prompts the model and normalizes its JSON reply."""

    client: CompletionClient
    model: str
    temperature: float = 0.2
    max_output_tokens: int = 900

    async def parse(self, request: ParseRequest) -> dict[str, object]:
        """Run a parse request through the model and return the parsed object."""
        if not request.mode or not request.text:
            raise InvalidRequestError("Fields mode and text are required")
        mode = ParseMode.resolve(request.mode)
        if mode is None:
            raise InvalidRequestError(f"Unknown mode: {request.mode}")

        use_search = mode is ParseMode.BARCODE or bool(request.use_search)
        options = CompletionOptions(
            model=self.model,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            use_search=use_search,
        )
        _logger.info("Parsing request: mode=%s search=%s", mode.value, use_search)
        payload = await self.client.complete(
            prompt=system_prompt(mode), message=request.text, options=options
        )

        text = strip_code_fences(extract_output_text(payload))
        json_text = extract_json_span(text)
        if json_text is None:
            _logger.warning("Model reply has no JSON object: mode=%s", mode.value)
            raise UpstreamFormatError(raw=text, data=payload)
        try:
            parsed = json.loads(json_text, parse_constant=_reject_constant)
        except ValueError as exc:
            _logger.warning("Model reply is not valid JSON: %s", exc)
            raise UpstreamJSONError(raw=text, json_text=json_text) from exc

        if mode is ParseMode.MEAL:
            apply_meal_totals(parsed)
        return parsed


def extract_output_text(payload: dict[str, object]) -> str:
    """Concatenate text parts from a Responses API output array."""
    output = payload.get("output")
    if not isinstance(output, list):
        return ""
    fragments: list[str] = []
    for item in output:
        content = item.get("content") if isinstance(item, dict) else None
        if not isinstance(content, list):
            continue
        for part in content:
            text = part.get("text") if isinstance(part, dict) else None
            if isinstance(text, str):
                fragments.append(text)
    return "".join(fragments).strip()


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences wrapping a model reply."""
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    cleaned = _OPENING_FENCE.sub("", cleaned)
    return _TRAILING_FENCE.sub("", cleaned).strip()


def extract_json_span(text: str) -> str | None:
    """Return the text between the first '{' and the last '}'.

    Braces in prose around the object break this, e.g. ``see {x} {"a": 1}``.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        return None
    return text[first : last + 1]


def apply_meal_totals(parsed: object) -> None:
    """Fill in meal totals from the items when the model left them out."""
    if not isinstance(parsed, dict):
        return
    items = parsed.get("items")
    if not isinstance(items, list):
        return
    if parsed.get("totals") in _MISSING_TOTALS:
        parsed["totals"] = compute_meal_totals(items)


def compute_meal_totals(items: list[object]) -> dict[str, float | int]:
    """Sum grams, calories and macros across meal items."""
    sums = dict.fromkeys(_TOTAL_FIELDS, 0.0)
    for item in items:
        if not isinstance(item, dict):
            continue
        for key in _TOTAL_FIELDS:
            sums[key] += _as_number(item.get(key))
    return {key: _compact(value) for key, value in sums.items()}


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _as_number(value: object) -> float:
    """Coerce a JSON value to a finite float, treating junk as zero."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip() or 0)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _compact(value: float) -> float | int:
    return int(value) if value.is_integer() else value
