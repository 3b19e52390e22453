"""
Game data model for the tic-tac-toe round engine.
A Game is a fixed number of Rounds played on a fresh Grid each time.
"""

from typing import Optional, List, Tuple, Dict, Any
from dataclasses import dataclass, field

from .config import GameConfig
from .grid import Grid, Mark, Side, Winner, is_valid_token


BoardSnapshot = Tuple[Tuple[Mark, ...], ...]


@dataclass(frozen=True)
class Round:
    """
    One finished play of the grid.
    """
    board: BoardSnapshot    # Final grid
    winner: Winner          # human, computer, or draw

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board": [list(row) for row in self.board],
            "winner": self.winner.value,
        }


@dataclass
class Game:
    """
    The complete state of a game, owned by the data service.

    Tracks:
    - Configuration (round count, tokens)
    - Whose turn is next
    - The in-progress grid
    - Finished rounds
    """

    num_rounds: int = GameConfig.DEFAULT_NUM_ROUNDS
    human_token: str = GameConfig.HUMAN_TOKEN
    computer_token: str = GameConfig.COMPUTER_TOKEN

    # Whose move it is in the current round
    next_player: Side = Side(GameConfig.FIRST_PLAYER)

    current_squares: Grid = field(default_factory=Grid)
    rounds: List[Round] = field(default_factory=list)

    # ISO-8601, set by whoever creates the game
    start_date_time: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.next_player, str):
            self.next_player = Side(self.next_player)

        if not isinstance(self.num_rounds, int) or self.num_rounds < 1:
            raise ValueError(f"num_rounds must be a positive integer, got {self.num_rounds!r}")
        if not is_valid_token(self.human_token) or not is_valid_token(self.computer_token):
            raise ValueError("Tokens must be non-empty strings")
        if self.human_token == self.computer_token:
            raise ValueError(f"Human and computer tokens must differ, both are {self.human_token!r}")

    def token_for(self, side: Side) -> str:
        """Get the token a side plays with."""
        return self.human_token if side == Side.HUMAN else self.computer_token

    def side_for(self, token: Mark) -> Optional[Side]:
        """Map a token back to its side, None for anything else."""
        if token == self.human_token:
            return Side.HUMAN
        if token == self.computer_token:
            return Side.COMPUTER
        return None

    def is_computer_turn(self) -> bool:
        return self.next_player == Side.COMPUTER


@dataclass(frozen=True)
class GameRecord:
    """
    Final, immutable report of a completed game.
    """
    id: str
    num_rounds: int
    human_token: str
    computer_token: str
    next_player: Side
    current_squares: BoardSnapshot
    rounds: Tuple[Round, ...]
    start_date_time: Optional[str]
    winner: Winner
    finish_date_time: str

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict form, e.g. for JSON."""
        return {
            "id": self.id,
            "numRounds": self.num_rounds,
            "humanToken": self.human_token,
            "computerToken": self.computer_token,
            "nextPlayer": self.next_player.value,
            "currentSquares": [list(row) for row in self.current_squares],
            "rounds": [r.to_dict() for r in self.rounds],
            "startDateTime": self.start_date_time,
            "winner": self.winner.value,
            "finishDateTime": self.finish_date_time,
        }
