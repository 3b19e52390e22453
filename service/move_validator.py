"""
Move validator for the game service.
Validates that moves follow the rules before they touch the grid.
"""

from typing import Optional, List
from dataclasses import dataclass

from engine.grid import Location, is_valid_location
from engine.game import Game
from engine.round_engine import RoundEngine


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates tic-tac-toe moves.

    Rules:
    1. There must be a game, and it must not be finished
    2. The current round must still be in progress
    3. Only the side whose turn it is may move, with its own token
    4. Can only place on empty cells inside the board
    """

    def __init__(self, round_engine: Optional[RoundEngine] = None):
        self.round_engine = round_engine or RoundEngine()

    def validate_move(
        self,
        game: Optional[Game],
        token: str,
        location: Location
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            game: Current game (None if none is loaded).
            token: Token being placed.
            location: (row, col) to place it on.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if game is None:
            return ValidationResult(
                is_valid=False,
                error_message="No game in progress!"
            )

        if len(game.rounds) >= game.num_rounds:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        if self.round_engine.is_round_over(game.current_squares):
            return ValidationResult(
                is_valid=False,
                error_message="Round is already over!"
            )

        # Token must belong to the side whose turn it is
        side = game.side_for(token)
        if side is None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Unknown token {token!r}"
            )
        if side != game.next_player:
            return ValidationResult(
                is_valid=False,
                error_message=f"It's {game.next_player.value}'s turn, not {side.value}'s!"
            )

        if not is_valid_location(location):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {location!r}. Must be 0-2."
            )

        row, col = location
        occupant = game.current_squares.get(location)
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell ({row}, {col}) is already occupied by {occupant}"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, game: Optional[Game]) -> List[Location]:
        """
        Get all cells the current player may take.

        Returns:
            List of (row, col), empty when the round or game is over.
        """
        if game is None or len(game.rounds) >= game.num_rounds:
            return []
        if self.round_engine.is_round_over(game.current_squares):
            return []
        return game.current_squares.get_empty_cells()
