from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from tilesync.game import GameSnapshot, GameState
from tilesync.lock import RWLock


class GameStore:
    """Owns the single GameState and the lock every access goes through.

    - `read()` for tile/state queries and initial sync (shared).
    - `write()` for moves and resets (exclusive). The whole check-mutate-recompute
      sequence, plus publishing its events, happens inside one `write()` block.
    """

    def __init__(self, game: GameState | None = None) -> None:
        self._game = game if game is not None else GameState()
        self._lock = RWLock()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[GameState]:
        async with self._lock.read():
            yield self._game

    @asynccontextmanager
    async def write(self) -> AsyncIterator[GameState]:
        async with self._lock.write():
            yield self._game

    async def snapshot(self) -> GameSnapshot:
        async with self.read() as game:
            return game.snapshot()
