"""
Tests for piece collision checks.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockfall.board import Board, Cell
from blockfall.collision import fits, piece_fits
from blockfall.pieces import Piece, PieceType, Position, PIECE_COUNT, occupied_cells

O = PieceType.O.value
I = PieceType.I.value


class TestCollision(unittest.TestCase):

    def setUp(self):
        self.board = Board()

    def test_spawn_position_fits_on_empty_board(self):
        for shape in range(PIECE_COUNT):
            self.assertTrue(fits(self.board, shape, 0, Board.BOARD_WIDTH // 2, 0))

    def test_side_borders(self):
        # O occupies local columns 1 and 2
        self.assertFalse(fits(self.board, O, 0, -1, 0))
        self.assertTrue(fits(self.board, O, 0, 0, 0))
        self.assertTrue(fits(self.board, O, 0, 8, 0))
        self.assertFalse(fits(self.board, O, 0, 9, 0))

    def test_floor(self):
        self.assertTrue(fits(self.board, O, 0, 6, 14))
        self.assertFalse(fits(self.board, O, 0, 6, 15))

    def test_locked_cell(self):
        self.board.set_cell(7, 5, Cell.LOCKED)
        self.assertFalse(fits(self.board, O, 0, 6, 4))
        self.assertTrue(fits(self.board, O, 0, 6, 5))  # rows 6 and 7
        self.assertTrue(fits(self.board, O, 0, 6, 2))

    def test_outside_grid_does_not_fit(self):
        # Vertical I in local column 2
        self.assertFalse(fits(self.board, I, 0, -3, 0))
        self.assertFalse(fits(self.board, I, 0, 11, 0))
        self.assertFalse(fits(self.board, O, 0, 6, -2))

    def test_rotation_is_reduced_mod_four(self):
        for rotation in range(4):
            self.assertEqual(fits(self.board, I, rotation, 8, 0),
                             fits(self.board, I, rotation + 4, 8, 0))

    def test_piece_fits_wrapper(self):
        piece = Piece(PieceType.O, Position(6, 14, 0))
        self.assertTrue(piece_fits(self.board, piece))
        self.assertFalse(piece_fits(self.board, piece.translate(0, 1)))

    def test_never_fits_over_locked_or_border(self):
        for x in range(1, 11, 3):
            self.board.set_cell(x, 10, Cell.LOCKED)
        for shape in range(PIECE_COUNT):
            for rotation in range(4):
                for x in range(-1, Board.BOARD_WIDTH):
                    for y in range(0, Board.BOARD_HEIGHT):
                        cells = [(x + px, y + py) for px, py in occupied_cells(shape, rotation)]
                        blocked = any(
                            self.board.in_bounds(cx, cy) and self.board.get_cell(cx, cy) != Cell.EMPTY
                            for cx, cy in cells
                        )
                        if blocked:
                            self.assertFalse(fits(self.board, shape, rotation, x, y))

    def test_fits_does_not_modify_board(self):
        before = self.board.grid.copy()
        fits(self.board, O, 0, 6, 0)
        fits(self.board, O, 0, 6, 15)
        self.assertTrue((self.board.grid == before).all())


if __name__ == '__main__':
    unittest.main()
