"""
Orchestrator for the tic-tac-toe round engine.

Re-evaluates the game on every state change and proposes the next step:
- report the game outcome when the last round is in
- report the round outcome when the grid is won or full
- otherwise ask for a computer move when it's the computer's turn

The game itself belongs to the data service. The orchestrator never edits
it; it returns a command and the service applies it.
"""

from typing import Optional, Union, Any, Protocol
from dataclasses import dataclass

from .config import GameConfig
from .grid import Location, Winner
from .game import Game, GameRecord, BoardSnapshot
from .round_engine import RoundEngine
from .computer_player import ComputerPlayer
from .game_aggregator import GameAggregator


@dataclass(frozen=True)
class RegisterMove:
    """Ask the service to put token on location."""
    token: str
    location: Location


@dataclass(frozen=True)
class ReportRound:
    """Tell the service the round ended."""
    winner: Winner
    board: BoardSnapshot


@dataclass(frozen=True)
class ReportGame:
    """Tell the service the game ended."""
    record: GameRecord

    @property
    def game_id(self) -> str:
        return self.record.id


Command = Union[RegisterMove, ReportRound, ReportGame]


class GameCollaborator(Protocol):
    """What the orchestrator needs from the data service."""

    def fetch_current_game(self) -> Optional[Game]: ...

    def register_move(self, token: str, location: Location) -> Any: ...

    def round_over(self, winner: Winner, board: BoardSnapshot) -> None: ...

    def game_over(self, record: GameRecord, game_id: str) -> None: ...


class Orchestrator:
    """
    Drives a game from outside state changes.

    Checks run in a fixed order: game over, then round over, then
    computer's turn. Nothing is stored between evaluations.
    """

    def __init__(
        self,
        round_engine: Optional[RoundEngine] = None,
        computer_player: Optional[ComputerPlayer] = None,
        aggregator: Optional[GameAggregator] = None,
        debug: Optional[bool] = None
    ):
        self.round_engine = round_engine or RoundEngine()
        self.computer_player = computer_player or ComputerPlayer(debug=debug)
        self.aggregator = aggregator or GameAggregator()
        self.debug = GameConfig.DEBUG_MODE if debug is None else debug

    def evaluate(self, game: Optional[Game]) -> Optional[Command]:
        """
        Decide what should happen next.

        Args:
            game: Current game, or None if it hasn't been fetched yet.

        Returns:
            The command to apply, or None when waiting on the human.
        """
        if game is None:
            return None  # Nothing fetched yet

        if self.aggregator.is_game_over(game):
            record = self.aggregator.finalize_game(game)
            return ReportGame(record=record)

        grid = game.current_squares

        if self.round_engine.is_round_over(grid):
            winner = self.round_engine.round_winner(grid, game)
            return ReportRound(winner=winner, board=grid.snapshot())

        if game.is_computer_turn():
            move = self.computer_player.choose_move(grid)
            if move is None:
                return None
            return RegisterMove(token=game.computer_token, location=move)

        return None

    def dispatch(self, command: Optional[Command], collaborator: GameCollaborator):
        """
        Forward a command to the matching collaborator call.

        Args:
            command: Result of evaluate(); None does nothing.
            collaborator: The data service.
        """
        if command is None:
            return

        if self.debug:
            print(f">>> Orchestrator: {command}")

        if isinstance(command, ReportGame):
            collaborator.game_over(command.record, command.game_id)
        elif isinstance(command, ReportRound):
            collaborator.round_over(command.winner, command.board)
        elif isinstance(command, RegisterMove):
            collaborator.register_move(command.token, command.location)
        else:
            raise TypeError(f"Unknown command {command!r}")

    def on_state_change(self, collaborator: GameCollaborator) -> Optional[Command]:
        """
        Listener for the data service: fetch, evaluate, dispatch.

        Returns:
            The command that was dispatched, if any.
        """
        command = self.evaluate(collaborator.fetch_current_game())
        self.dispatch(command, collaborator)
        return command

    def attach(self, service) -> "Orchestrator":
        """Subscribe to a service's state-change notifications."""
        service.subscribe(self.on_state_change)
        return self
