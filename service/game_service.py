"""
In-memory game service.

Plays the part of the data service the round engine talks to: it owns the
current Game, applies moves, records rounds and finished games, and tells
its listeners whenever the state changes.
"""

from typing import Optional, List, Dict, Callable, Any

from engine.config import GameConfig
from engine.grid import Grid, Location, Side, Winner
from engine.game import Game, Round, GameRecord, BoardSnapshot
from engine.game_aggregator import utc_now_iso
from .move_validator import MoveValidator, ValidationResult


Listener = Callable[["GameService"], Any]


class GameService:
    """
    Owns one game at a time.

    Listeners are called synchronously after every change. A change made
    from inside a listener does not recurse; the listeners run again once
    the current pass is done, so notifications are never interleaved.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        clock: Optional[Callable[[], str]] = None,
        validator: Optional[MoveValidator] = None,
        debug: Optional[bool] = None
    ):
        """
        Initialize the service.

        Args:
            config: Game defaults.
            clock: Returns the current time as ISO-8601.
            validator: Move validator (default: MoveValidator()).
            debug: Print every state change (default: config.DEBUG_MODE).
        """
        self.config = config or GameConfig()
        self.clock = clock or utc_now_iso
        self.validator = validator or MoveValidator()
        self.debug = self.config.DEBUG_MODE if debug is None else debug

        self.current_game: Optional[Game] = None
        self.completed_games: Dict[str, GameRecord] = {}

        # Who opened the round in progress
        self.round_opener: Side = Side(self.config.FIRST_PLAYER)

        self._listeners: List[Listener] = []
        self._notifying = False
        self._pending = False

    # ==================== LISTENERS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a state-change listener.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        """Run every listener, then again while changes keep coming in."""
        if self._notifying:
            self._pending = True
            return

        self._notifying = True
        try:
            while True:
                self._pending = False
                for listener in list(self._listeners):
                    listener(self)
                if not self._pending:
                    break
        finally:
            self._notifying = False

    # ==================== GAME LIFECYCLE ====================

    def new_game(
        self,
        num_rounds: Optional[int] = None,
        human_token: Optional[str] = None,
        computer_token: Optional[str] = None,
        first_player: Optional[Side] = None
    ) -> Game:
        """
        Start a new game, replacing any game in progress.

        Args:
            num_rounds: Rounds to play (default from config).
            human_token: Human's token (default from config).
            computer_token: Computer's token (default from config).
            first_player: Who opens the first round (default from config).

        Returns:
            The new Game.
        """
        if first_player is None:
            first_player = Side(self.config.FIRST_PLAYER)
        elif isinstance(first_player, str):
            first_player = Side(first_player)

        game = Game(
            num_rounds=num_rounds if num_rounds is not None else self.config.DEFAULT_NUM_ROUNDS,
            human_token=human_token if human_token is not None else self.config.HUMAN_TOKEN,
            computer_token=computer_token if computer_token is not None else self.config.COMPUTER_TOKEN,
            next_player=first_player,
            start_date_time=self.clock(),
        )

        self.current_game = game
        self.round_opener = first_player

        if self.debug:
            print(f">>> New game: {game.num_rounds} rounds, "
                  f"human={game.human_token} computer={game.computer_token}, "
                  f"{first_player.value} first")

        self._notify()
        return game

    def fetch_current_game(self) -> Optional[Game]:
        """Get the game in progress, or None if there isn't one."""
        return self.current_game

    def register_move(self, token: str, location: Location) -> ValidationResult:
        """
        Place a token and hand the turn to the other side.

        Args:
            token: Token being placed.
            location: (row, col) to place it on.

        Returns:
            ValidationResult; the game is untouched when it's invalid.
        """
        game = self.current_game
        result = self.validator.validate_move(game, token, location)

        if not result.is_valid:
            print(f"WARNING: Move rejected: {result.error_message}")
            return result

        location = tuple(location)
        game.current_squares.place(location, token)
        game.next_player = game.next_player.opposite()

        if self.debug:
            print(f">>> {token} placed at {location}")

        self._notify()
        return result

    def round_over(self, winner: Winner, board: BoardSnapshot):
        """
        Record a finished round and set up the next one.

        Args:
            winner: Outcome of the round.
            board: Final grid of the round.
        """
        game = self.current_game
        if game is None:
            print("WARNING: round_over() with no game in progress, ignoring")
            return
        if len(game.rounds) >= game.num_rounds:
            print("WARNING: round_over() after the last round, ignoring")
            return

        winner = Winner(winner)
        game.rounds.append(
            Round(board=tuple(tuple(row) for row in board), winner=winner)
        )

        # Fresh grid for the next round
        game.current_squares = Grid()

        if self.config.ALTERNATE_FIRST_PLAYER:
            self.round_opener = self.round_opener.opposite()
        game.next_player = self.round_opener

        if self.debug:
            print(f">>> Round {len(game.rounds)}/{game.num_rounds} over: {winner.value}")

        self._notify()

    def game_over(self, record: GameRecord, game_id: str):
        """
        Store a finished game and clear the current one.

        Args:
            record: The final game record.
            game_id: Id to store it under.
        """
        if game_id in self.completed_games:
            print(f"WARNING: Game {game_id} already recorded, ignoring")
            return

        self.completed_games[game_id] = record
        self.current_game = None

        if self.debug:
            print(f">>> Game {game_id} over: {record.winner.value}")

        self._notify()
