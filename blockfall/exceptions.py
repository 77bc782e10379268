# Blockfall - falling-block puzzle engine
# exceptions.py - Contract violations raised by the geometry layer

class InvalidPieceException(Exception):
    """Raised for a shape index that is not one of the seven tetrominoes."""
    pass

class CellOutOfBoundsException(Exception):
    """Raised for board access outside the grid or writes to a border cell."""
    pass

class InvalidCellValueException(Exception):
    """Raised when anything other than EMPTY or LOCKED is written to the board."""
    pass
