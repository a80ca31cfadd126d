"""ASGI entrypoint for the farm assistant API."""

from farm_assistant.api.app import create_app
from farm_assistant.containers import build_container

app = create_app(build_container())
