from __future__ import annotations

from pydantic import BaseModel

from tilesync.core.board import Cell, Condition, Mark
from tilesync.game import GameSnapshot


class TileGrid(BaseModel):
    tiles: list[list[Cell]]


class GameStateResponse(BaseModel):
    condition: Condition


class MoveRequest(BaseModel):
    state: Mark


class GameSnapshotResponse(BaseModel):
    tiles: list[list[Cell]]
    condition: Condition

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> GameSnapshotResponse:
        return cls(tiles=snapshot.tiles_as_lists(), condition=snapshot.condition)


class HealthResponse(BaseModel):
    status: str
    subscribers: int
