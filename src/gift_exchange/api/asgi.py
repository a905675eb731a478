"""ASGI entrypoint for the gift exchange API."""

from gift_exchange.api.app import create_app
from gift_exchange.containers import build_container

app = create_app(build_container())
