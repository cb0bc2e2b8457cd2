"""ASGI entrypoint for the replay acquisition API."""

from replay_acquisition.api.app import create_app
from replay_acquisition.containers import build_container

app = create_app(build_container())
