"""ASGI entrypoint for the nutrition parser API."""

from nutrition_parser.api.app import create_app
from nutrition_parser.containers import build_container

app = create_app(build_container())
