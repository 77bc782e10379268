"""
Tetromino definitions for Blockfall.
Each piece is a single 4x4 mask; the other three orientations are read
through fixed index formulas instead of being stored.
"""

from enum import Enum
from typing import List, Optional, Tuple
import numpy as np
from dataclasses import dataclass

from .exceptions import InvalidPieceException


class PieceType(Enum):
    """The 7 standard Tetris pieces, in shape-table order."""
    I = 0
    T = 1
    O = 2
    Z = 3
    S = 4
    L = 5
    J = 6


# Rotation-state 0 of every piece, row-major over a 4x4 box ('X' = filled)
TETROMINOES = (
    "..X...X...X...X.",
    "..X..XX...X.....",
    ".....XX..XX.....",
    "..X..XX..X......",
    ".X...XX...X.....",
    ".X...X...XX.....",
    "..X...X..XX.....",
)


def _parse_mask(pattern: str) -> int:
    mask = 0
    for i, symbol in enumerate(pattern):
        if symbol != '.':
            mask |= 1 << i
    return mask


SHAPE_MASKS = tuple(_parse_mask(p) for p in TETROMINOES)
PIECE_COUNT = len(SHAPE_MASKS)


def cell_index(px: int, py: int, rotation: int) -> int:
    """
    Map a local cell (px, py) to its index in the rotation-0 mask.

    Rotation 1, 2 and 3 read the mask turned by 90, 180 and 270 degrees;
    any other value is taken modulo 4.
    """
    rotation %= 4
    if rotation == 0:
        return py * 4 + px
    if rotation == 1:
        return 12 + py - (px * 4)
    if rotation == 2:
        return 15 - (py * 4) - px
    return 3 - py + (px * 4)


def occupancy(shape: int, rotation: int, px: int, py: int) -> bool:
    """True if the local cell (px, py) is filled for this shape and rotation."""
    if not 0 <= shape < PIECE_COUNT:
        raise InvalidPieceException(f"unknown shape index: {shape}")
    return bool((SHAPE_MASKS[shape] >> cell_index(px, py, rotation)) & 1)


def occupied_cells(shape: int, rotation: int) -> List[Tuple[int, int]]:
    """Local (px, py) coordinates of the filled cells."""
    return [(px, py)
            for py in range(4)
            for px in range(4)
            if occupancy(shape, rotation, px, py)]


@dataclass
class Position:
    """Represents a piece position on the board."""
    x: int
    y: int
    rotation: int  # 0, 1, 2, 3 for 0°, 90°, 180°, 270°


class Piece:
    """The active piece: a shape plus its board-relative origin and rotation."""

    def __init__(self, piece_type: PieceType, position: Position):
        self.piece_type = piece_type
        self.position = position
        self._shape = None

    @property
    def shape(self) -> np.ndarray:
        """Get the current orientation as a 4x4 array of 0/1."""
        if self._shape is None:
            self._shape = np.zeros((4, 4), dtype=np.int8)
            for px, py in occupied_cells(self.piece_type.value, self.position.rotation):
                self._shape[py][px] = 1
        return self._shape

    def get_occupied_cells(self) -> List[Tuple[int, int]]:
        """Get the board coordinates occupied by this piece."""
        return [(self.position.x + px, self.position.y + py)
                for px, py in occupied_cells(self.piece_type.value, self.position.rotation)]

    def rotate(self, direction: int) -> 'Piece':
        """Rotate the piece (1 for clockwise, -1 for counterclockwise)."""
        new_rotation = (self.position.rotation + direction) % 4
        return Piece(self.piece_type, Position(
            self.position.x, self.position.y, new_rotation
        ))

    def translate(self, dx: int, dy: int) -> 'Piece':
        """Move the piece by the given offsets."""
        return Piece(self.piece_type, Position(
            self.position.x + dx, self.position.y + dy, self.position.rotation
        ))

    def __eq__(self, other):
        if not isinstance(other, Piece):
            return False
        return (self.piece_type == other.piece_type and
                self.position.x == other.position.x and
                self.position.y == other.position.y and
                self.position.rotation == other.position.rotation)

    def __hash__(self):
        return hash((self.piece_type, self.position.x, self.position.y, self.position.rotation))

    def __repr__(self):
        return f"Piece({self.piece_type.name}, x={self.position.x}, y={self.position.y}, r={self.position.rotation})"


def random_piece_type(rng: Optional[np.random.Generator] = None) -> PieceType:
    """Draw a piece type uniformly from the seven shapes."""
    if rng is None:
        rng = np.random.default_rng()
    return PieceType(int(rng.integers(0, PIECE_COUNT)))
