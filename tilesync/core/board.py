from __future__ import annotations

from enum import StrEnum

BOARD_SIZE = 3


class Cell(StrEnum):
    empty = "Empty"
    mark_a = "MarkA"
    mark_b = "MarkB"


class Mark(StrEnum):
    """The subset of cells a move may place."""

    mark_a = "MarkA"
    mark_b = "MarkB"

    def as_cell(self) -> Cell:
        return Cell(self.value)


class Condition(StrEnum):
    in_progress = "InProgress"
    win_a = "WinA"
    win_b = "WinB"
    draw = "Draw"


Board = list[list[Cell]]
Line = tuple[tuple[int, int], ...]

# Scan order matters: rows, then columns, then the diagonal, then the anti-diagonal.
WIN_LINES: tuple[Line, ...] = (
    *(tuple((r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)),
    *(tuple((r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE)),
    tuple((i, i) for i in range(BOARD_SIZE)),
    tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
)

_WIN_FOR_CELL: dict[Cell, Condition] = {
    Cell.mark_a: Condition.win_a,
    Cell.mark_b: Condition.win_b,
}


def empty_board() -> Board:
    return [[Cell.empty for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def derive_condition(board: Board) -> Condition:
    """Derive the game condition from a board.

    The first complete line (all three cells holding the same mark) decides the
    winner. With no complete line, a full board is a draw.
    """

    for line in WIN_LINES:
        first = board[line[0][0]][line[0][1]]
        if first == Cell.empty:
            continue
        if all(board[x][y] == first for x, y in line[1:]):
            return _WIN_FOR_CELL[first]

    if all(cell != Cell.empty for row in board for cell in row):
        return Condition.draw

    return Condition.in_progress
