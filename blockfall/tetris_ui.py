import logging
import tkinter as tk

from .board import Board, Cell
from .tetris_engine import TetrisEngine

logger = logging.getLogger(__name__)

BOARD_WIDTH = Board.BOARD_WIDTH
BOARD_HEIGHT = Board.BOARD_HEIGHT
TICK_MS = 50
# X11 auto-repeat sends release/press pairs a few ms apart while a key is held
RELEASE_DELAY_MS = 30

COLORS = {
    Cell.EMPTY: "#000000",
    Cell.LOCKED: "#ff0000",
    Cell.ACTIVE: "#00ff00",
    Cell.BORDER: "#0000ff",
}

KEY_ACTIONS = {
    'Right': 'right',
    'Left': 'left',
    'Down': 'soft_drop',
    'Up': 'rotate_cw',
}


def cell_size_for_screen(screen_height: int) -> int:
    """Cell size that makes the board two thirds of the screen height."""
    return max(1, round(screen_height / BOARD_HEIGHT * 2 / 3))


class KeyState:
    """
    Edge-triggered key tracking.

    A held key counts as one press until it is released. Releases are
    deferred by RELEASE_DELAY_MS so that a release immediately followed by
    a press of the same key (keyboard auto-repeat) is treated as still held.
    """

    def __init__(self, root, release_delay_ms: int = RELEASE_DELAY_MS):
        self.root = root
        self.release_delay_ms = release_delay_ms
        self.held = set()
        self.release_jobs = {}
        self.pressed = set()

    def press(self, keysym: str):
        action = KEY_ACTIONS.get(keysym)
        if action is None:
            return
        job = self.release_jobs.pop(keysym, None)
        if job is not None:
            # Auto-repeat: the key never really went up
            self.root.after_cancel(job)
            return
        if keysym not in self.held:
            self.held.add(keysym)
            self.pressed.add(action)

    def release(self, keysym: str):
        if keysym not in self.held or keysym in self.release_jobs:
            return
        self.release_jobs[keysym] = self.root.after(
            self.release_delay_ms, self._finish_release, keysym)

    def _finish_release(self, keysym: str):
        self.release_jobs.pop(keysym, None)
        self.held.discard(keysym)

    def take(self) -> set:
        """Actions pressed since the last call."""
        actions, self.pressed = self.pressed, set()
        return actions


class TetrisUI:
    def __init__(self, root, engine: TetrisEngine, tick_ms: int = TICK_MS):
        self.root = root
        self.root.title("Tetris")
        self.engine = engine
        self.tick_ms = tick_ms
        self.final_score = None

        self.cell_size = cell_size_for_screen(root.winfo_screenheight())
        width = BOARD_WIDTH * self.cell_size
        height = BOARD_HEIGHT * self.cell_size
        left = (root.winfo_screenwidth() - width) // 2
        top = (root.winfo_screenheight() - height) // 2
        self.root.geometry(f"{width}x{height}+{max(left, 0)}+{max(top, 0)}")
        self.root.minsize(BOARD_WIDTH, BOARD_HEIGHT)

        self.canvas = tk.Canvas(root, width=width, height=height, bg=COLORS[Cell.EMPTY],
                                highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.canvas.bind("<Configure>", self.on_resize)

        self.keys = KeyState(root)
        self.root.bind("<KeyPress>", self.on_key_press)
        self.root.bind("<KeyRelease>", self.on_key_release)

        self.rects = []
        self.create_cells()
        self.draw_board(self.engine.snapshot())

    def create_cells(self):
        self.canvas.delete("all")
        self.rects = []
        size = self.cell_size
        for y in range(BOARD_HEIGHT):
            row = []
            for x in range(BOARD_WIDTH):
                row.append(self.canvas.create_rectangle(
                    x*size, y*size, (x+1)*size, (y+1)*size,
                    fill=COLORS[Cell.EMPTY], width=0
                ))
            self.rects.append(row)

    def on_resize(self, event):
        size = max(1, min(event.width // BOARD_WIDTH, event.height // BOARD_HEIGHT))
        if size != self.cell_size:
            self.cell_size = size
            self.create_cells()
            self.draw_board(self.engine.snapshot())

    def on_key_press(self, event):
        self.keys.press(event.keysym)

    def on_key_release(self, event):
        self.keys.release(event.keysym)

    def draw_board(self, snapshot):
        try:
            for y in range(BOARD_HEIGHT):
                for x in range(BOARD_WIDTH):
                    color = COLORS[Cell(int(snapshot.cells[y][x]))]
                    self.canvas.itemconfigure(self.rects[y][x], fill=color)
        except tk.TclError as e:
            logger.error("Failed to draw frame: %s", e)

    def start(self):
        self.root.after(self.tick_ms, self.run_game)

    def run_game(self):
        snapshot = self.engine.tick(self.keys.take())
        self.draw_board(snapshot)
        if snapshot.game_over:
            self.final_score = snapshot.score
            print("GAME OVER!")
            print(f"SCORE: {snapshot.score}!")
            self.root.destroy()
            return
        self.root.after(self.tick_ms, self.run_game)


def play(engine: TetrisEngine, tick_ms: int = TICK_MS) -> int:
    """Open the game window and block until the game ends. Returns the final score."""
    root = tk.Tk()
    app = TetrisUI(root, engine, tick_ms=tick_ms)
    app.start()
    root.mainloop()
    return engine.score
