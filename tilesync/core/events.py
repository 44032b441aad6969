from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from tilesync.core.board import BOARD_SIZE, Cell, Condition

if TYPE_CHECKING:
    from tilesync.game import GameSnapshot


STATE_TOPIC = "game.state"
TILE_TOPIC_PREFIX = "game.tile."  # + {x}.{y}


def tile_topic(x: int, y: int) -> str:
    return f"{TILE_TOPIC_PREFIX}{x}.{y}"


class Envelope(BaseModel):
    """The unit of publication: a dot-separated topic plus an opaque payload."""

    model_config = ConfigDict(frozen=True)

    topic: str
    payload: Any


class TileUpdate(BaseModel):
    state: Cell


class StateUpdate(BaseModel):
    condition: Condition


def tile_envelope(x: int, y: int, cell: Cell) -> Envelope:
    return Envelope(topic=tile_topic(x, y), payload=TileUpdate(state=cell).model_dump(mode="json"))


def state_envelope(condition: Condition) -> Envelope:
    return Envelope(topic=STATE_TOPIC, payload=StateUpdate(condition=condition).model_dump(mode="json"))


def board_envelopes(tiles: list[list[Cell]] | tuple[tuple[Cell, ...], ...]) -> list[Envelope]:
    return [tile_envelope(x, y, tiles[x][y]) for x in range(BOARD_SIZE) for y in range(BOARD_SIZE)]


def snapshot_envelopes(snapshot: GameSnapshot) -> list[Envelope]:
    """Every tile (x-major) followed by the condition.

    This is what a freshly connected subscriber needs to render the current game.
    """

    return [*board_envelopes(snapshot.tiles), state_envelope(snapshot.condition)]
