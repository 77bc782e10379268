"""
Blockfall: falling-block puzzle game.
Command-line interface.
"""

import argparse
import logging
import random
import time
from typing import Optional

from . import ACTIONS, GameConfig, TetrisEngine

logger = logging.getLogger(__name__)

DEFAULT_TICK_MS = 50


def demo_game(engine: TetrisEngine, tick_ms: int = 0, print_every: int = 100,
              max_ticks: Optional[int] = None, seed: Optional[int] = None) -> int:
    """Play with random inputs in the terminal until game over. Returns the final score."""
    bot = random.Random(seed)

    while not engine.game_over:
        if max_ticks is not None and engine.tick_count >= max_ticks:
            break

        # Mostly soft drops so pieces stack up quickly
        if bot.random() < 0.5:
            actions = ['soft_drop']
        else:
            actions = [bot.choice(ACTIONS)]

        engine.tick(actions)

        if print_every and engine.tick_count % print_every == 0:
            print(f"\nTick: {engine.tick_count}")
            print(engine)
            print("-" * 30)

        if tick_ms:
            time.sleep(tick_ms / 1000)

    return engine.score


def report_game_over(score: int):
    print("GAME OVER!")
    print(f"SCORE: {score}!")


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Blockfall: falling-block puzzle game")
    parser.add_argument('--seed', type=int, default=None, help='Seed for piece selection')
    parser.add_argument('--tick-ms', type=int, default=DEFAULT_TICK_MS, help='Delay between ticks in milliseconds')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('play', help='Play in a window (default)')

    demo_parser = subparsers.add_parser('demo', help='Run a random-input game in the terminal')
    demo_parser.add_argument('--print-every', type=int, default=100, help='Print the board every N ticks (0 to disable)')
    demo_parser.add_argument('--max-ticks', type=int, default=None, help='Stop after this many ticks')

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='[BLOCKFALL] %(asctime)s %(levelname)s %(name)s - %(message)s')

    engine = TetrisEngine(GameConfig(seed=args.seed))

    if args.command == 'demo':
        score = demo_game(engine, tick_ms=args.tick_ms, print_every=args.print_every,
                          max_ticks=args.max_ticks, seed=args.seed)
        if engine.game_over:
            report_game_over(score)
        else:
            print(f"Stopped after {engine.tick_count} ticks. SCORE: {score}")
        return 0

    from . import tetris_ui
    tetris_ui.play(engine, tick_ms=args.tick_ms)
    if not engine.game_over:
        logger.info("Window closed before game over, score %d", engine.score)
    return 0
