"""
Board state management for Blockfall.
Owns the bordered playfield grid, piece locking, full-row detection,
row clearing and the collapse of rows above a cleared line.
"""

from enum import IntEnum
from typing import Iterable, List, Optional
import numpy as np

from .exceptions import CellOutOfBoundsException, InvalidCellValueException
from .pieces import Piece


class Cell(IntEnum):
    """Values stored in the playfield and in render snapshots."""
    EMPTY = 0
    LOCKED = 7
    ACTIVE = 8
    BORDER = 9


class Board:
    """Playfield grid, bordered on the left, right and bottom."""

    BOARD_WIDTH = 12
    BOARD_HEIGHT = 18

    def __init__(self):
        self.grid = self._new_grid()

    def _new_grid(self) -> np.ndarray:
        grid = np.full((self.BOARD_HEIGHT, self.BOARD_WIDTH), Cell.EMPTY, dtype=np.int8)
        grid[:, 0] = Cell.BORDER
        grid[:, -1] = Cell.BORDER
        grid[-1, :] = Cell.BORDER
        return grid

    def reset(self):
        """Reset the board to an empty bordered field."""
        self.grid = self._new_grid()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.BOARD_WIDTH and 0 <= y < self.BOARD_HEIGHT

    def is_border(self, x: int, y: int) -> bool:
        return x == 0 or x == self.BOARD_WIDTH - 1 or y == self.BOARD_HEIGHT - 1

    def get_cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise CellOutOfBoundsException(f"cell ({x}, {y}) is outside the board")
        return Cell(int(self.grid[y, x]))

    def set_cell(self, x: int, y: int, value: Cell):
        """Write EMPTY or LOCKED to an interior cell. Border cells are fixed."""
        if not self.in_bounds(x, y):
            raise CellOutOfBoundsException(f"cell ({x}, {y}) is outside the board")
        if self.is_border(x, y):
            raise CellOutOfBoundsException(f"cell ({x}, {y}) is a border cell")
        if value not in (Cell.EMPTY, Cell.LOCKED):
            raise InvalidCellValueException(f"cannot store {value!r} in the board")
        self.grid[y, x] = value

    def lock_piece(self, piece: Piece):
        """
        Commit the piece's cells to the board as LOCKED.
        The caller has already established that the piece cannot descend.
        """
        for x, y in piece.get_occupied_cells():
            self.set_cell(x, y, Cell.LOCKED)

    def detect_full_rows(self, start: int, end: int) -> List[int]:
        """Rows in [start, end) whose interior cells are all LOCKED, ascending."""
        start = max(start, 0)
        end = min(end, self.BOARD_HEIGHT - 1)
        return [y for y in range(start, end)
                if np.all(self.grid[y, 1:-1] == Cell.LOCKED)]

    def clear_rows(self, rows: Iterable[int]):
        """Empty the interior of each row; the rows above stay where they are."""
        for y in rows:
            self.grid[y, 1:-1] = Cell.EMPTY

    def collapse_rows_down(self, rows: Iterable[int]):
        """
        Drop everything above each cleared row by one.

        Rows are handled one at a time in the order given, so they must be
        passed top to bottom (ascending), as detect_full_rows returns them.
        """
        for v in rows:
            if v > 0:
                self.grid[1:v + 1, 1:-1] = self.grid[0:v, 1:-1].copy()
            self.grid[0, 1:-1] = Cell.EMPTY

    def render(self, piece: Optional[Piece] = None) -> np.ndarray:
        """Copy of the grid with the active piece drawn as ACTIVE."""
        view = self.grid.copy()
        if piece is not None:
            for x, y in piece.get_occupied_cells():
                if self.in_bounds(x, y):
                    view[y, x] = Cell.ACTIVE
        return view

    def __str__(self):
        return render_text(self.grid)

    def __repr__(self):
        locked = int(np.sum(self.grid == Cell.LOCKED))
        return f"Board({self.BOARD_WIDTH}x{self.BOARD_HEIGHT}, locked={locked})"


CELL_SYMBOLS = {
    Cell.EMPTY: "·",
    Cell.LOCKED: "█",
    Cell.ACTIVE: "○",
    Cell.BORDER: "#",
}


def render_text(cells: np.ndarray) -> str:
    """Text rendering of a grid or snapshot, one line per row."""
    return "\n".join(
        "".join(CELL_SYMBOLS[Cell(int(value))] for value in row)
        for row in cells
    )
