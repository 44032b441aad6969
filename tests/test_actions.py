from __future__ import annotations

import asyncio

import pytest

from tilesync.actions import make_move, reset_game
from tilesync.core.board import Cell, Condition, Mark
from tilesync.core.events import Envelope
from tilesync.game import CellOccupied, GameAlreadyDecided, OutOfBounds
from tilesync.game_store import GameStore
from tilesync.websocket_hub import BroadcastHub, Subscriber


def _drain(subscriber: Subscriber) -> list[Envelope]:
    out: list[Envelope] = []
    while not subscriber.queue.empty():
        out.append(Envelope.model_validate_json(subscriber.queue.get_nowait()))
    return out


@pytest.fixture()
def store() -> GameStore:
    return GameStore()


@pytest.fixture()
def hub() -> BroadcastHub:
    return BroadcastHub()


@pytest.mark.asyncio
async def test_move_publishes_tile_update_only(store: GameStore, hub: BroadcastHub) -> None:
    s = Subscriber.create()
    await hub.subscribe(s)

    result = await make_move(store=store, hub=hub, x=1, y=2, mark=Mark.mark_a)

    assert result.snapshot.tiles[1][2] == Cell.mark_a
    assert _drain(s) == [Envelope(topic="game.tile.1.2", payload={"state": "MarkA"})]
    assert result.envelopes == [Envelope(topic="game.tile.1.2", payload={"state": "MarkA"})]


@pytest.mark.asyncio
async def test_deciding_move_also_publishes_condition(store: GameStore, hub: BroadcastHub) -> None:
    s = Subscriber.create()
    await hub.subscribe(s)

    for y in range(3):
        result = await make_move(store=store, hub=hub, x=2, y=y, mark=Mark.mark_b)

    assert result.snapshot.condition == Condition.win_b
    envelopes = _drain(s)
    assert [e.topic for e in envelopes] == ["game.tile.2.0", "game.tile.2.1", "game.tile.2.2", "game.state"]
    assert envelopes[-1].payload == {"condition": "WinB"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("moves", "x", "y", "exc"),
    [
        ([], 3, 0, OutOfBounds),
        ([(0, 0)], 0, 0, CellOccupied),
        ([(0, 0), (0, 1), (0, 2)], 1, 1, GameAlreadyDecided),
    ],
)
async def test_rejected_move_publishes_nothing(store: GameStore, hub: BroadcastHub, moves, x, y, exc) -> None:  # type: ignore[no-untyped-def]
    for mx, my in moves:
        await make_move(store=store, hub=hub, x=mx, y=my, mark=Mark.mark_a)

    s = Subscriber.create()
    await hub.subscribe(s)
    before = await store.snapshot()

    with pytest.raises(exc):
        await make_move(store=store, hub=hub, x=x, y=y, mark=Mark.mark_b)

    assert s.queue.empty()
    assert await store.snapshot() == before


@pytest.mark.asyncio
async def test_write_lock_released_after_rejected_move(store: GameStore, hub: BroadcastHub) -> None:
    with pytest.raises(OutOfBounds):
        await make_move(store=store, hub=hub, x=9, y=9, mark=Mark.mark_a)

    async with asyncio.timeout(1):
        await make_move(store=store, hub=hub, x=0, y=0, mark=Mark.mark_a)


@pytest.mark.asyncio
async def test_reset_publishes_every_tile_and_condition(store: GameStore, hub: BroadcastHub) -> None:
    for y in range(3):
        await make_move(store=store, hub=hub, x=0, y=y, mark=Mark.mark_a)

    s = Subscriber.create()
    await hub.subscribe(s)
    result = await reset_game(store=store, hub=hub)

    envelopes = _drain(s)
    assert len(envelopes) == 10
    assert all(e.payload == {"state": "Empty"} for e in envelopes[:9])
    assert envelopes[-1] == Envelope(topic="game.state", payload={"condition": "InProgress"})
    assert result.snapshot.condition == Condition.in_progress
    assert result.envelopes == envelopes
