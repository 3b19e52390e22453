"""
Round engine for the tic-tac-toe round engine package.
Decides when a round has ended and who took it.
"""

from typing import Optional

from .grid import Grid, Winner, GameStateError
from .game import Game
from .win_checker import WinChecker


class RoundEngine:
    """
    Ends a round on a completed line or a full grid.

    A grid that is full and has a line is a win, never a draw.
    """

    def __init__(self, win_checker: Optional[WinChecker] = None):
        self.win_checker = win_checker or WinChecker()

    def is_round_over(self, grid: Grid) -> bool:
        """
        Check if the round has ended.

        Args:
            grid: The current board.

        Returns:
            True if a line is complete or all 9 cells are taken.
        """
        if self.win_checker.check_winner(grid) is not None:
            return True
        return grid.is_full()

    def round_winner(self, grid: Grid, game: Game) -> Winner:
        """
        Get the outcome of a finished round.

        Args:
            grid: The final board.
            game: Supplies the human and computer tokens.

        Returns:
            Winner.HUMAN, Winner.COMPUTER or Winner.DRAW.

        Raises:
            GameStateError: If the round is still in progress.
        """
        if not self.is_round_over(grid):
            raise GameStateError("round_winner() called while the round is still in progress")

        token = self.win_checker.check_winner(grid)

        if token is None:
            return Winner.DRAW
        if token == game.computer_token:
            return Winner.COMPUTER
        if token == game.human_token:
            return Winner.HUMAN

        # A line of some foreign token; neither side took it
        return Winner.DRAW
