"""
Collision checks for Blockfall.
"""

from .board import Board, Cell
from .pieces import Piece, occupied_cells


def fits(board: Board, shape: int, rotation: int, x: int, y: int) -> bool:
    """
    Check whether a piece could occupy the given origin and rotation.

    A filled cell outside the grid, or on a LOCKED or BORDER cell, is a
    collision. Nothing is modified; callers commit the move only on True.
    """
    for px, py in occupied_cells(shape, rotation % 4):
        board_x, board_y = x + px, y + py
        if not board.in_bounds(board_x, board_y):
            return False
        if board.get_cell(board_x, board_y) != Cell.EMPTY:
            return False
    return True


def piece_fits(board: Board, piece: Piece) -> bool:
    position = piece.position
    return fits(board, piece.piece_type.value, position.rotation, position.x, position.y)
