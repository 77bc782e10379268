"""
Tests for the tetromino shape table and the Piece model.
"""

import unittest
import numpy as np
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockfall.pieces import (
    Piece, PieceType, Position, cell_index, occupancy, occupied_cells,
    random_piece_type, PIECE_COUNT,
)
from blockfall.exceptions import InvalidPieceException


class TestShapeTable(unittest.TestCase):
    """Test the rotation index formulas and occupancy lookups."""

    def test_cell_index_formulas(self):
        self.assertEqual(cell_index(0, 0, 0), 0)
        self.assertEqual(cell_index(3, 3, 0), 15)
        self.assertEqual(cell_index(0, 0, 1), 12)
        self.assertEqual(cell_index(0, 0, 2), 15)
        self.assertEqual(cell_index(0, 0, 3), 3)
        self.assertEqual(cell_index(1, 2, 1), 10)

    def test_each_rotation_is_a_permutation(self):
        for rotation in range(4):
            indices = sorted(cell_index(px, py, rotation) for px in range(4) for py in range(4))
            self.assertEqual(indices, list(range(16)))

    def test_rotation_is_periodic(self):
        for rotation in range(8):
            for px in range(4):
                for py in range(4):
                    self.assertEqual(cell_index(px, py, rotation + 4), cell_index(px, py, rotation))
        self.assertEqual(cell_index(1, 2, -1), cell_index(1, 2, 3))
        self.assertEqual(occupancy(0, 5, 2, 0), occupancy(0, 1, 2, 0))
        for shape in range(PIECE_COUNT):
            self.assertEqual(occupied_cells(shape, 6), occupied_cells(shape, 2))

    def test_invalid_shape_raises(self):
        with self.assertRaises(InvalidPieceException):
            occupancy(PIECE_COUNT, 0, 0, 0)

    def test_every_orientation_has_four_cells(self):
        for shape in range(PIECE_COUNT):
            for rotation in range(4):
                self.assertEqual(len(occupied_cells(shape, rotation)), 4)

    def test_i_piece_orientations(self):
        self.assertEqual(occupied_cells(PieceType.I.value, 0), [(2, 0), (2, 1), (2, 2), (2, 3)])
        self.assertEqual(occupied_cells(PieceType.I.value, 1), [(0, 2), (1, 2), (2, 2), (3, 2)])

    def test_o_piece_is_rotation_invariant(self):
        expected = occupied_cells(PieceType.O.value, 0)
        for rotation in range(1, 4):
            self.assertEqual(sorted(occupied_cells(PieceType.O.value, rotation)), sorted(expected))

    def test_four_rotations_return_to_start(self):
        for piece_type in PieceType:
            piece = Piece(piece_type, Position(0, 0, 0))
            rotated = piece
            for _ in range(4):
                rotated = rotated.rotate(1)
            self.assertEqual(rotated.position.rotation, 0)
            self.assertTrue(np.array_equal(rotated.shape, piece.shape))

    def test_distinct_shapes(self):
        masks = {tuple(sorted(occupied_cells(shape, 0))) for shape in range(PIECE_COUNT)}
        self.assertEqual(len(masks), PIECE_COUNT)


class TestPieces(unittest.TestCase):
    """Test piece functionality."""

    def test_piece_creation(self):
        piece = Piece(PieceType.T, Position(6, 0, 0))
        self.assertEqual(piece.piece_type, PieceType.T)
        self.assertEqual(piece.position.x, 6)
        self.assertEqual(piece.position.y, 0)
        self.assertEqual(piece.position.rotation, 0)

    def test_piece_rotation(self):
        piece = Piece(PieceType.T, Position(6, 0, 0))
        rotated = piece.rotate(1)
        self.assertEqual(rotated.position.rotation, 1)
        self.assertEqual(piece.rotate(-1).position.rotation, 3)
        self.assertEqual(rotated.position.x, 6)
        self.assertEqual(rotated.position.y, 0)

    def test_piece_translation(self):
        piece = Piece(PieceType.T, Position(3, 0, 0))
        translated = piece.translate(2, 1)
        self.assertEqual(translated.position.x, 5)
        self.assertEqual(translated.position.y, 1)
        self.assertEqual(piece.position.x, 3)

    def test_piece_shape(self):
        piece = Piece(PieceType.I, Position(3, 0, 0))
        shape = piece.shape
        self.assertEqual(shape.shape, (4, 4))
        self.assertEqual(int(shape.sum()), 4)
        self.assertTrue(np.all(shape[:, 2] == 1))

    def test_occupied_cells(self):
        piece = Piece(PieceType.O, Position(6, 0, 0))
        self.assertEqual(sorted(piece.get_occupied_cells()), [(7, 1), (7, 2), (8, 1), (8, 2)])

    def test_random_piece_type_is_seeded(self):
        first = [random_piece_type(np.random.default_rng(7)) for _ in range(3)]
        second = [random_piece_type(np.random.default_rng(7)) for _ in range(3)]
        self.assertEqual(first, second)
        self.assertIsInstance(first[0], PieceType)


if __name__ == '__main__':
    unittest.main()
