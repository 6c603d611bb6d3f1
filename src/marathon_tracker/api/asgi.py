"""ASGI entrypoint for the marathon tracker API."""

from marathon_tracker.api.app import create_app
from marathon_tracker.containers import build_container

app = create_app(build_container())
