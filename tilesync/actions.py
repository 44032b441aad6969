from __future__ import annotations

import logging
from dataclasses import dataclass

from tilesync.core.board import Mark
from tilesync.core.events import Envelope, snapshot_envelopes, state_envelope, tile_envelope
from tilesync.game import GameSnapshot
from tilesync.game_store import GameStore
from tilesync.websocket_hub import BroadcastHub

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of applying an action.

    - `snapshot`: the game right after the mutation.
    - `envelopes`: what was published to the hub, in publish order.
    """

    snapshot: GameSnapshot
    envelopes: list[Envelope]


async def _publish_all(*, hub: BroadcastHub, envelopes: list[Envelope]) -> None:
    for envelope in envelopes:
        await hub.publish_envelope(envelope)


async def make_move(*, store: GameStore, hub: BroadcastHub, x: int, y: int, mark: Mark | str) -> ActionResult:
    """Apply a move and publish what changed.

    Raises a `MoveError` (and publishes nothing) if the move is rejected. Events are
    published while the write lock is still held so subscribers see them in the same
    order the mutations happened.
    """

    async with store.write() as game:
        previous = game.condition
        game.apply_move(x, y, mark)
        snapshot = game.snapshot()

        envelopes = [tile_envelope(x, y, snapshot.tiles[x][y])]
        if snapshot.condition != previous:
            envelopes.append(state_envelope(snapshot.condition))

        await _publish_all(hub=hub, envelopes=envelopes)

    if snapshot.condition != previous:
        logger.info("Game decided: %s", snapshot.condition.value)
    return ActionResult(snapshot=snapshot, envelopes=envelopes)


async def reset_game(*, store: GameStore, hub: BroadcastHub) -> ActionResult:
    async with store.write() as game:
        game.reset()
        snapshot = game.snapshot()

        envelopes = snapshot_envelopes(snapshot)
        await _publish_all(hub=hub, envelopes=envelopes)

    logger.info("Game reset")
    return ActionResult(snapshot=snapshot, envelopes=envelopes)
