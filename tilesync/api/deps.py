from __future__ import annotations

from fastapi.requests import HTTPConnection

from tilesync.game_store import GameStore
from tilesync.settings import Settings
from tilesync.websocket_hub import BroadcastHub

# The composition root (`create_app`) puts one store and one hub on `app.state`;
# these work for both HTTP and WebSocket routes.


def get_store(conn: HTTPConnection) -> GameStore:
    return conn.app.state.store


def get_hub(conn: HTTPConnection) -> BroadcastHub:
    return conn.app.state.hub


def get_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings
