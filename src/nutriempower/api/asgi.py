"""ASGI entrypoint for the NutriEmpower API."""

from nutriempower.api.app import create_app
from nutriempower.containers import build_container

app = create_app(build_container())
