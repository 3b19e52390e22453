"""
Game aggregator for the tic-tac-toe round engine.
Tallies finished rounds and builds the final game record.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from .grid import Winner, GameStateError
from .game import Game, GameRecord


def new_game_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-01-01T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class GameAggregator:
    """
    Decides when a game is finished and who won it overall.

    Id generation and the clock are injected so records are reproducible
    in tests.
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], str]] = None
    ):
        """
        Initialize the aggregator.

        Args:
            id_factory: Returns a fresh unique id (default: uuid4).
            clock: Returns the current time as ISO-8601 (default: UTC now).
        """
        self.id_factory = id_factory or new_game_id
        self.clock = clock or utc_now_iso

    def is_game_over(self, game: Game) -> bool:
        """True once the configured number of rounds has been recorded."""
        return len(game.rounds) == game.num_rounds

    def game_winner(self, game: Game) -> Winner:
        """
        Get the overall winner of a finished game.

        Draw rounds count for nobody. Equal counts are a draw.

        Raises:
            GameStateError: If the game is still in progress.
        """
        if not self.is_game_over(game):
            raise GameStateError(
                f"game_winner() called after {len(game.rounds)} of {game.num_rounds} rounds"
            )

        human_count = 0
        computer_count = 0

        for round_ in game.rounds:
            if round_.winner == Winner.HUMAN:
                human_count += 1
            elif round_.winner == Winner.COMPUTER:
                computer_count += 1

        if human_count > computer_count:
            return Winner.HUMAN
        elif computer_count > human_count:
            return Winner.COMPUTER
        else:
            return Winner.DRAW

    def finalize_game(self, game: Game) -> GameRecord:
        """
        Build the immutable record of a finished game.

        Args:
            game: A game whose round history is complete.

        Returns:
            GameRecord with the winner, a new id and the finish time.
        """
        winner = self.game_winner(game)

        return GameRecord(
            id=self.id_factory(),
            num_rounds=game.num_rounds,
            human_token=game.human_token,
            computer_token=game.computer_token,
            next_player=game.next_player,
            current_squares=game.current_squares.snapshot(),
            rounds=tuple(game.rounds),
            start_date_time=game.start_date_time,
            winner=winner,
            finish_date_time=self.clock(),
        )
