"""FastAPI application factory."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from nutrition_parser.app_logging import configure_logging
from nutrition_parser.config import cors_headers
from nutrition_parser.containers import AppContainer
from nutrition_parser.domain.nutrition import (
    ErrorResult,
    MealResult,
    NotFoundResult,
    NutritionItem,
    ParseRequest,
    RecipeResult,
)
from nutrition_parser.services.parser import InvalidRequestError, ParserError

PARSER_PATH = "/api/gptParser"
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    headers = cors_headers(container.settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> Response:
        if (
            exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
            and request.url.path == PARSER_PATH
        ):
            return _method_not_allowed(headers)
        return await http_exception_handler(request, exc)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.api_route(
        PARSER_PATH,
        methods=_ALL_METHODS,
        response_model=None,
        responses={
            200: {"model": NutritionItem | RecipeResult | MealResult | NotFoundResult},
            400: {"model": ErrorResult},
            405: {"model": ErrorResult},
            500: {"model": ErrorResult},
        },
    )
    async def gpt_parser(request: Request) -> Response:
        """Parse free-form food text into nutrition JSON."""
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_200_OK, headers=headers)
        if request.method != "POST":
            return _method_not_allowed(headers)

        state_container: AppContainer = request.app.state.container
        try:
            parse_request = _read_parse_request(await request.body())
            parsed = await state_container.parser_service.parse(parse_request)
            return JSONResponse(
                parsed, status_code=status.HTTP_200_OK, headers=headers
            )
        except ParserError as exc:
            return JSONResponse(
                exc.to_payload(), status_code=exc.status_code, headers=headers
            )
        except Exception:
            logger.exception("Server error")
            return JSONResponse(
                {"error": "Internal server error"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                headers=headers,
            )

    return app


def _method_not_allowed(headers: dict[str, str]) -> JSONResponse:
    return JSONResponse(
        {"error": "Method not allowed"},
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers=headers,
    )


def _read_parse_request(body: bytes) -> ParseRequest:
    """Decode a request body, treating anything but a JSON object as empty."""
    try:
        data = json.loads(body) if body else {}
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    try:
        return ParseRequest.model_validate(data)
    except ValidationError as exc:
        fields = sorted(
            {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        )
        raise InvalidRequestError(f"Invalid value for: {', '.join(fields)}") from exc
