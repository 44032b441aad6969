from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, WebSocket, status

from tilesync.actions import make_move, reset_game
from tilesync.api.deps import get_hub, get_settings, get_store
from tilesync.api.models import (
    GameSnapshotResponse,
    GameStateResponse,
    HealthResponse,
    MoveRequest,
    TileGrid,
)
from tilesync.connection import serve_subscriber
from tilesync.game import MoveError
from tilesync.game_store import GameStore
from tilesync.settings import Settings
from tilesync.websocket_hub import BroadcastHub

router = APIRouter()
api_router = APIRouter(prefix="/api")


@router.websocket("/ws")
async def game_updates_ws(
    websocket: WebSocket,
    store: GameStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
    settings: Settings = Depends(get_settings),
) -> None:
    await serve_subscriber(websocket, store=store, hub=hub, queue_size=settings.subscriber_queue_size)


@router.get("/healthcheck", response_model=HealthResponse)
async def healthcheck(hub: BroadcastHub = Depends(get_hub)) -> HealthResponse:
    return HealthResponse(status="ok", subscribers=hub.count())


@api_router.get("/tiles", response_model=TileGrid)
async def get_tiles_route(store: GameStore = Depends(get_store)) -> TileGrid:
    snapshot = await store.snapshot()
    return TileGrid(tiles=snapshot.tiles_as_lists())


@api_router.get("/state", response_model=GameStateResponse)
async def get_state_route(store: GameStore = Depends(get_store)) -> GameStateResponse:
    async with store.read() as game:
        return GameStateResponse(condition=game.condition)


@api_router.post("/tile/{x}/{y}", response_model=GameSnapshotResponse)
async def make_move_route(
    x: int,
    y: int,
    payload: MoveRequest,
    store: GameStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> GameSnapshotResponse:
    try:
        result = await make_move(store=store, hub=hub, x=x, y=y, mark=payload.state)
    except MoveError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return GameSnapshotResponse.from_snapshot(result.snapshot)


@api_router.post("/reset", response_model=GameSnapshotResponse)
async def reset_route(
    store: GameStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> GameSnapshotResponse:
    result = await reset_game(store=store, hub=hub)
    return GameSnapshotResponse.from_snapshot(result.snapshot)


router.include_router(api_router)
