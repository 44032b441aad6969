from __future__ import annotations

import logging

import anyio
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from tilesync.core.events import snapshot_envelopes
from tilesync.game_store import GameStore
from tilesync.websocket_hub import BroadcastHub, Subscriber, SubscriptionHandle

logger = logging.getLogger(__name__)


async def _pump_outbound(websocket: WebSocket, subscriber: Subscriber) -> None:
    while True:
        message = await subscriber.queue.get()
        await websocket.send_text(message)


async def _read_inbound(websocket: WebSocket, subscriber: Subscriber) -> None:
    # Inbound frames carry no commands yet; keep reading so a close is noticed.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            logger.info("WebSocket client %s disconnected", subscriber.id)
            return
        text = message.get("text")
        if text is not None:
            logger.debug("Received message from %s: %s", subscriber.id, text)


async def _sync_and_subscribe(*, store: GameStore, hub: BroadcastHub, subscriber: Subscriber) -> SubscriptionHandle:
    """Queue the current game for a new subscriber, then register it for live updates.

    Both steps happen under the read lock: no move can land between the snapshot and
    the registration, so the subscriber neither misses nor repeats an update.
    """

    async with store.read() as game:
        for envelope in snapshot_envelopes(game.snapshot()):
            hub.send_to(subscriber, envelope.topic, envelope.payload)
        return await hub.subscribe(subscriber)


async def _close_if_open(websocket: WebSocket) -> None:
    if websocket.client_state != WebSocketState.CONNECTED or websocket.application_state != WebSocketState.CONNECTED:
        return
    try:
        await websocket.close()
    except (RuntimeError, OSError) as e:
        logger.debug("WebSocket close failed: %s", e)


async def _run_until_either_side_exits(websocket: WebSocket, subscriber: Subscriber) -> bool:
    """Run the writer and reader together; the first to exit cancels the other.

    Returns True if the writer side failed (the socket could not take a send).
    """

    writer_failed = False

    async with anyio.create_task_group() as tg:

        async def writer() -> None:
            nonlocal writer_failed
            try:
                await _pump_outbound(websocket, subscriber)
            except Exception as e:
                writer_failed = True
                logger.warning("WebSocket send failed for client %s: %s", subscriber.id, e)
            finally:
                tg.cancel_scope.cancel()

        async def reader() -> None:
            try:
                await _read_inbound(websocket, subscriber)
            except Exception as e:
                logger.warning("WebSocket error for client %s: %s", subscriber.id, e)
            finally:
                tg.cancel_scope.cancel()

        tg.start_soon(writer)
        tg.start_soon(reader)

    return writer_failed


async def serve_subscriber(
    websocket: WebSocket,
    *,
    store: GameStore,
    hub: BroadcastHub,
    queue_size: int = 0,
) -> None:
    """Run one WebSocket connection as a hub subscriber until either side stops.

    A writer task drains the subscriber queue into the socket while a reader task
    watches for the close. Whichever finishes first cancels the other. The subscriber
    is always unregistered on the way out, including on error and cancellation.
    """

    await websocket.accept()
    subscriber = Subscriber.create(maxsize=queue_size)
    handle: SubscriptionHandle | None = None

    logger.info("WebSocket client %s connected", subscriber.id)
    try:
        handle = await _sync_and_subscribe(store=store, hub=hub, subscriber=subscriber)
        if await _run_until_either_side_exits(websocket, subscriber):
            await _close_if_open(websocket)
    finally:
        # Nothing may await ahead of the unsubscribe: a repeated cancel would skip it.
        subscriber.close()
        if handle is not None:
            with anyio.CancelScope(shield=True):
                await hub.unsubscribe(handle)
        logger.info("WebSocket client %s cleaned up", subscriber.id)
