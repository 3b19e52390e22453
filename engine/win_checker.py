"""
Win checker for the tic-tac-toe round engine.
Finds a winning line on the grid, if there is one.
"""

from typing import Optional, List, Tuple

from .grid import Grid, Location, Mark, EMPTY, is_valid_token


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 identical tokens in a row
    (horizontally, vertically, or diagonally)
    """

    # All possible winning lines, in the order they are checked
    WINNING_LINES: Tuple[Tuple[Location, ...], ...] = (
        # Rows
        ((0, 0), (0, 1), (0, 2)),
        ((1, 0), (1, 1), (1, 2)),
        ((2, 0), (2, 1), (2, 2)),
        # Columns
        ((0, 0), (1, 0), (2, 0)),
        ((0, 1), (1, 1), (2, 1)),
        ((0, 2), (1, 2), (2, 2)),
        # Diagonals
        ((0, 0), (1, 1), (2, 2)),
        ((0, 2), (1, 1), (2, 0)),
    )

    def check_winner(self, grid: Grid) -> Optional[str]:
        """
        Check if there's a winner.

        Args:
            grid: The board to inspect.

        Returns:
            The winning token, or None if no line is complete.
        """
        line = self.get_winning_line(grid)
        if line is None:
            return None
        return grid.get(line[0])

    def get_winning_line(self, grid: Grid) -> Optional[Tuple[Location, ...]]:
        """
        Get the first complete line, rows first, then columns, then diagonals.

        Args:
            grid: The board to inspect.

        Returns:
            The winning line as a tuple of (row, col), or None.
        """
        for line in self.WINNING_LINES:
            if self._check_line(grid, line) is not EMPTY:
                return line
        return None

    def has_won(self, grid: Grid, token: str) -> bool:
        """True if token fills at least one winning line. The empty mark never wins."""
        if not is_valid_token(token):
            return False

        return any(
            self._check_line(grid, line) == token
            for line in self.WINNING_LINES
        )

    def _check_line(self, grid: Grid, line: Tuple[Location, ...]) -> Mark:
        """
        Check if a single line is held by one token.

        Returns:
            The token if all 3 cells match, None otherwise.
        """
        marks: List[Mark] = [grid.get(location) for location in line]

        if marks[0] is EMPTY:
            return EMPTY  # Empty cell, no winner on this line

        if marks[0] == marks[1] == marks[2]:
            return marks[0]

        return EMPTY
