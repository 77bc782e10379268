"""
Main game engine for Blockfall.
Owns the board, the active piece, score and difficulty, and advances the
game one discrete tick at a time.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import numpy as np

from .board import Board, render_text
from .collision import piece_fits
from .pieces import Piece, PieceType, Position, random_piece_type

logger = logging.getLogger(__name__)

# Player actions, applied in this order within a tick
ACTIONS = ('right', 'left', 'soft_drop', 'rotate_cw')

LOCK_POINTS = 25
LINE_CLEAR_POINTS = 100


@dataclass
class GameConfig:
    """Configuration for the game's pacing and difficulty."""
    initial_fall_interval: int = 20  # Ticks between automatic drops
    min_fall_interval: int = 10
    pieces_per_speed_up: int = 50  # Locks between fall-interval decrements
    line_clear_pause_ticks: int = 8  # Ticks the cleared rows stay visible
    seed: Optional[int] = None


class GamePhase(Enum):
    RUNNING = "running"
    LINE_CLEAR_PENDING = "line_clear_pending"
    GAME_OVER = "game_over"


@dataclass
class RenderSnapshot:
    """What the presentation draws after a tick."""
    cells: np.ndarray  # BOARD_HEIGHT x BOARD_WIDTH array of Cell values
    score: int
    phase: GamePhase
    cleared_rows: Tuple[int, ...]
    fall_interval: int
    pieces_locked: int

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER


def calculate_lock_score(lines_cleared: int) -> int:
    """Flat points for a lock plus (2 ** lines) * 100 when any rows clear."""
    score = LOCK_POINTS
    if lines_cleared > 0:
        score += (1 << lines_cleared) * LINE_CLEAR_POINTS
    return score


class TetrisEngine:
    """Single-player game state machine driven by tick()."""

    def __init__(self, config: Optional[GameConfig] = None,
                 piece_source: Optional[Callable[[], Any]] = None):
        self.config = config or GameConfig()
        self.board = Board()
        self.rng = np.random.default_rng(self.config.seed)
        self.piece_source = piece_source or (lambda: random_piece_type(self.rng))

        # Callbacks
        self.on_piece_locked: Optional[Callable] = None
        self.on_lines_cleared: Optional[Callable] = None
        self.on_speed_up: Optional[Callable] = None
        self.on_game_over: Optional[Callable] = None

        self._initialize_game()

    def _initialize_game(self):
        """Initialize the game state."""
        self.board.reset()
        self.current_piece: Optional[Piece] = None
        self.phase = GamePhase.RUNNING
        self.score = 0
        self.fall_interval = self.config.initial_fall_interval
        self.fall_counter = 0
        self.pieces_locked = 0
        self.pending_rows: List[int] = []
        self.pause_remaining = 0
        self.tick_count = 0

        self._spawn_piece()

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def reset(self):
        """Reset the game to initial state."""
        self._initialize_game()

    def tick(self, inputs: Optional[Iterable[str]] = None) -> RenderSnapshot:
        """Advance the game by one tick and return what to draw."""
        if self.phase == GamePhase.GAME_OVER:
            return self.snapshot()

        self.tick_count += 1

        if self.phase == GamePhase.LINE_CLEAR_PENDING:
            self.pause_remaining -= 1
            if self.pause_remaining <= 0:
                self._finish_line_clear()
            return self.snapshot()

        if inputs:
            self._handle_inputs(inputs)

        self._apply_gravity()

        return self.snapshot()

    def snapshot(self) -> RenderSnapshot:
        return RenderSnapshot(
            cells=self.board.render(self.current_piece),
            score=self.score,
            phase=self.phase,
            cleared_rows=tuple(self.pending_rows),
            fall_interval=self.fall_interval,
            pieces_locked=self.pieces_locked,
        )

    def _handle_inputs(self, inputs: Iterable[str]):
        """Apply each requested action once, in ACTIONS order."""
        requested = set(inputs)
        for action in requested - set(ACTIONS):
            logger.debug("Ignoring unknown action %r", action)

        if 'right' in requested:
            self._move_piece(1, 0)
        if 'left' in requested:
            self._move_piece(-1, 0)
        if 'soft_drop' in requested:
            self._move_piece(0, 1)
        if 'rotate_cw' in requested:
            self._rotate_piece(1)

    def _move_piece(self, dx: int, dy: int) -> bool:
        """Move the current piece by the given offset."""
        if not self.current_piece:
            return False

        moved = self.current_piece.translate(dx, dy)
        if piece_fits(self.board, moved):
            self.current_piece = moved
            return True
        return False

    def _rotate_piece(self, direction: int) -> bool:
        """Rotate the current piece in place; no wall kicks."""
        if not self.current_piece:
            return False

        rotated = self.current_piece.rotate(direction)
        if piece_fits(self.board, rotated):
            self.current_piece = rotated
            return True
        return False

    def _apply_gravity(self):
        """Drop the piece one row every fall_interval ticks, locking it when it cannot."""
        self.fall_counter += 1
        if self.fall_counter < self.fall_interval:
            return
        self.fall_counter = 0

        if not self._move_piece(0, 1):
            self._lock_current_piece()

    def _lock_current_piece(self):
        piece = self.current_piece
        self.board.lock_piece(piece)
        self.current_piece = None
        self._record_piece_locked()

        # Only the rows under the piece's 4x4 box can have been completed
        top = piece.position.y
        rows = self.board.detect_full_rows(top, top + 4)
        if rows:
            self.board.clear_rows(rows)

        self.score += calculate_lock_score(len(rows))
        logger.debug("Locked %r, score %d", piece, self.score)

        if self.on_piece_locked:
            self.on_piece_locked(piece, rows)

        if rows:
            logger.info("Cleared %d line(s): %s", len(rows), rows)
            self.pending_rows = rows
            if self.on_lines_cleared:
                self.on_lines_cleared(list(rows))
            if self.config.line_clear_pause_ticks > 0:
                self.phase = GamePhase.LINE_CLEAR_PENDING
                self.pause_remaining = self.config.line_clear_pause_ticks
                return
            self._finish_line_clear()
            return

        self._spawn_piece()

    def _record_piece_locked(self):
        """Count a lock and speed the game up every pieces_per_speed_up locks."""
        self.pieces_locked += 1
        if self.pieces_locked % self.config.pieces_per_speed_up != 0:
            return
        if self.fall_interval > self.config.min_fall_interval:
            self.fall_interval -= 1
            logger.info("Fall interval now %d ticks", self.fall_interval)
            if self.on_speed_up:
                self.on_speed_up(self.fall_interval)

    def _finish_line_clear(self):
        """Collapse the rows cleared by the last lock and bring in the next piece."""
        self.board.collapse_rows_down(self.pending_rows)
        self.pending_rows = []
        self.pause_remaining = 0
        self.phase = GamePhase.RUNNING
        self._spawn_piece()

    def _spawn_piece(self):
        """Spawn a new piece at the top centre; game over if it does not fit."""
        piece_type = PieceType(self.piece_source())
        spawn_pos = Position(Board.BOARD_WIDTH // 2, 0, 0)
        self.current_piece = Piece(piece_type, spawn_pos)
        self.fall_counter = 0

        if not piece_fits(self.board, self.current_piece):
            self.phase = GamePhase.GAME_OVER
            logger.info("Game over with score %d after %d pieces", self.score, self.pieces_locked)
            if self.on_game_over:
                self.on_game_over(self.score)
            return

        logger.debug("Spawned %r", self.current_piece)

    def get_stats(self) -> Dict[str, Any]:
        """Get current game statistics."""
        return {
            'score': self.score,
            'pieces_locked': self.pieces_locked,
            'fall_interval': self.fall_interval,
            'tick_count': self.tick_count,
            'phase': self.phase.value,
            'game_over': self.game_over,
        }

    def __str__(self):
        """String representation of the game state."""
        result = []
        result.append(f"Score: {self.score}")
        result.append(f"Pieces: {self.pieces_locked}")
        result.append(f"Fall interval: {self.fall_interval}")
        result.append("")
        result.append(render_text(self.board.render(self.current_piece)))
        return "\n".join(result)
