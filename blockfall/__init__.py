"""
Blockfall: a falling-block puzzle game engine.
Contains the piece table, collision checks, board management and the tick-driven engine.
"""

from .tetris_engine import TetrisEngine, GameConfig, GamePhase, RenderSnapshot, ACTIONS
from .board import Board, Cell
from .pieces import Piece, PieceType, Position
from .collision import fits, piece_fits
from .exceptions import CellOutOfBoundsException, InvalidCellValueException, InvalidPieceException

__all__ = [
    'TetrisEngine', 'GameConfig', 'GamePhase', 'RenderSnapshot', 'ACTIONS',
    'Board', 'Cell', 'Piece', 'PieceType', 'Position', 'fits', 'piece_fits',
    'CellOutOfBoundsException', 'InvalidCellValueException', 'InvalidPieceException',
]
