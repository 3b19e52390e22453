"""
Computer player for the tic-tac-toe round engine.
Picks a random empty cell - no strategy.
"""

import random
from typing import Optional

from .config import GameConfig
from .grid import Grid, Location


class ComputerPlayer:
    """
    Plays a uniformly random legal move.

    The random source is injectable so tests can seed it or stub it.
    """

    def __init__(self, rng: Optional[random.Random] = None, debug: Optional[bool] = None):
        """
        Initialize the computer player.

        Args:
            rng: Anything with a choice(seq) method (default: a fresh random.Random).
            debug: Print each chosen move (default: GameConfig.DEBUG_MODE).
        """
        self.rng = rng or random.Random()
        self.debug = GameConfig.DEBUG_MODE if debug is None else debug

    def choose_move(self, grid: Grid) -> Optional[Location]:
        """
        Choose a move on the current grid.

        Args:
            grid: Current board.

        Returns:
            (row, col) of an empty cell, or None if no moves available.
        """
        # Row-major, so a seeded rng always sees the same sequence
        valid_moves = grid.get_empty_cells()

        if not valid_moves:
            if self.debug:
                print("WARNING: Computer asked to move on a full grid!")
            return None

        move = self.rng.choice(valid_moves)

        if self.debug:
            print(f">>> Computer picked {move} out of {len(valid_moves)} empty cells")

        return move
