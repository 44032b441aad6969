from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from tilesync.api.routes import router
from tilesync.game_store import GameStore
from tilesync.settings import Settings, settings_from_env
from tilesync.websocket_hub import BroadcastHub

logger = logging.getLogger(__name__)

APP_NAME = "tilesync"
APP_VERSION = "0.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Composition root: one game store and one hub per app instance."""

    settings = settings if settings is not None else settings_from_env()

    # Configure logging
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.state.settings = settings
    app.state.store = GameStore()
    app.state.hub = BroadcastHub()
    app.include_router(router)

    # Serve the minimal web UI (no build step) when it ships alongside the code.
    if settings.static_dir.exists():
        app.mount("/ui", StaticFiles(directory=str(settings.static_dir), html=True), name="ui")

        @app.get("/", include_in_schema=False)
        async def _root() -> RedirectResponse:
            return RedirectResponse(url="/ui/")

    @app.get("/info")
    async def info() -> dict[str, str]:
        return {"name": APP_NAME, "version": APP_VERSION}

    logger.info("Created %s %s", APP_NAME, APP_VERSION)
    return app


def serve() -> None:
    import uvicorn

    settings = settings_from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())
