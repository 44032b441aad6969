from __future__ import annotations

from dataclasses import dataclass

from tilesync.core.board import (
    BOARD_SIZE,
    Board,
    Cell,
    Condition,
    Mark,
    copy_board,
    derive_condition,
    empty_board,
    in_bounds,
)
from tilesync.fsm import ConditionFSM


class MoveError(ValueError):
    """A move was rejected by the game rules. Always recoverable."""


class OutOfBounds(MoveError):
    def __init__(self, x: int, y: int) -> None:
        super().__init__(f"Invalid coordinates ({x}, {y}): must be within 0..{BOARD_SIZE - 1}")
        self.x = x
        self.y = y


class CellOccupied(MoveError):
    def __init__(self, x: int, y: int) -> None:
        super().__init__(f"Tile ({x}, {y}) already occupied")
        self.x = x
        self.y = y


class GameAlreadyDecided(MoveError):
    def __init__(self, condition: Condition) -> None:
        super().__init__(f"Game already finished ({condition.value})")
        self.condition = condition


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    tiles: tuple[tuple[Cell, ...], ...]
    condition: Condition

    def tiles_as_lists(self) -> list[list[Cell]]:
        return [list(row) for row in self.tiles]


class GameState:
    """Authoritative board plus its derived condition.

    Not synchronized on its own: callers go through `GameStore` which holds the lock.
    """

    def __init__(self) -> None:
        self._board: Board = empty_board()
        self._fsm = ConditionFSM()

    @property
    def condition(self) -> Condition:
        return self._fsm.condition

    def tile(self, x: int, y: int) -> Cell:
        if not in_bounds(x, y):
            raise OutOfBounds(x, y)
        return self._board[x][y]

    def apply_move(self, x: int, y: int, mark: Mark | str) -> None:
        mark = Mark(mark)

        if not in_bounds(x, y):
            raise OutOfBounds(x, y)
        if self._board[x][y] != Cell.empty:
            raise CellOccupied(x, y)
        if self._fsm.decided:
            raise GameAlreadyDecided(self._fsm.condition)

        self._board[x][y] = mark.as_cell()
        self._fsm.settle(derive_condition(self._board))

    def reset(self) -> None:
        self._board = empty_board()
        self._fsm.restart()

    def snapshot(self) -> GameSnapshot:
        board = copy_board(self._board)
        return GameSnapshot(tiles=tuple(tuple(row) for row in board), condition=self._fsm.condition)
