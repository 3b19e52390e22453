"""
Console session for the tic-tac-toe round engine.

This script ties together:
- Engine (grid, round and game rules, computer player, orchestrator)
- Service (in-memory game state, move validation)

Run this script to play a few rounds against the computer!
"""

import random
from typing import Optional

from engine.config import GameConfig
from engine.grid import Grid, Side, Winner, is_valid_token
from engine.game import Round, GameRecord
from engine.computer_player import ComputerPlayer
from engine.orchestrator import Orchestrator
from service.game_service import GameService


class TicTacToeSession:
    """
    One game in the terminal.

    Game flow:
    1. Human types a cell as "row col"
    2. Service applies it and notifies the orchestrator
    3. Orchestrator reports a finished round, or asks for the computer's move
    4. Repeat until the configured number of rounds is played
    """

    def __init__(
        self,
        num_rounds: int = GameConfig.DEFAULT_NUM_ROUNDS,
        human_token: str = GameConfig.HUMAN_TOKEN,
        computer_token: str = GameConfig.COMPUTER_TOKEN,
        first_player: Side = Side(GameConfig.FIRST_PLAYER),
        seed: Optional[int] = None,
        debug: Optional[bool] = None
    ):
        """
        Initialize the session.

        Args:
            num_rounds: Rounds in the game.
            human_token: Human's token.
            computer_token: Computer's token.
            first_player: Who opens the first round.
            seed: Seed for the computer's random moves.
            debug: Print engine and service tracing.
        """
        print("\n" + "="*60)
        print("   TicTacToe - Initializing...")
        print("="*60 + "\n")

        self.num_rounds = num_rounds
        self.human_token = human_token
        self.computer_token = computer_token
        self.first_player = first_player

        self.service = GameService(debug=debug)
        self.orchestrator = Orchestrator(
            computer_player=ComputerPlayer(rng=random.Random(seed), debug=debug),
            debug=debug
        )

        # Orchestrator first, so round results are in before we print them
        self.orchestrator.attach(self.service)
        self.service.subscribe(self._on_state_change)

        self.rounds_shown = 0
        self.is_running = False

        print(f"   Rounds: {num_rounds}")
        print(f"   Human plays: {human_token}")
        print(f"   Computer plays: {computer_token}")
        print("="*60 + "\n")

    def start(self) -> Optional[GameRecord]:
        """
        Play the game.

        Returns:
            The final record, or None if the human quit.
        """
        print("Enter moves as 'row col' (e.g. '1 1'), 'q' to quit\n")

        self.is_running = True
        self.service.new_game(
            num_rounds=self.num_rounds,
            human_token=self.human_token,
            computer_token=self.computer_token,
            first_player=self.first_player,
        )

        while self.is_running and self.service.current_game is not None:
            self._human_move()

        if self.service.current_game is not None:
            print("\nGame quit by user.")
            return None

        # Only one game is ever played per session
        record = next(iter(self.service.completed_games.values()))
        self._show_game_result(record)
        return record

    def _human_move(self):
        """Read and apply one human move."""
        game = self.service.current_game
        game.current_squares.print_board()

        try:
            text = input(f"\nYour move ({self.human_token}): ").strip()
        except EOFError:
            self.is_running = False
            return

        if text.lower() in ("q", "quit", "exit"):
            self.is_running = False
            return

        location = self._parse_location(text)
        if location is None:
            print("WARNING: Type two numbers 0-2, e.g. '0 2'")
            return

        self.service.register_move(self.human_token, location)

    @staticmethod
    def _parse_location(text: str):
        """Parse 'row col' or 'row,col' into a (row, col) tuple."""
        parts = text.replace(",", " ").split()
        if len(parts) != 2:
            return None
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            return None

    def _on_state_change(self, service: GameService):
        """Print each round as soon as it is recorded."""
        game = service.current_game
        if game is None:
            return

        while self.rounds_shown < len(game.rounds):
            self.rounds_shown += 1
            self._print_round(self.rounds_shown, game.num_rounds, game.rounds[self.rounds_shown - 1])

    @staticmethod
    def _print_round(number: int, num_rounds: int, round_: Round):
        print("\n" + "-"*60)
        print(f"   Round {number}/{num_rounds}")
        Grid.from_rows(round_.board).print_board()
        print(f"\n   Round winner: {round_.winner.value.upper()}")
        print("-"*60)

    def _show_game_result(self, record: GameRecord):
        """Show the final game result."""
        print("\n" + "="*60)
        print("   GAME OVER!")
        print("="*60)

        if record.winner == Winner.HUMAN:
            print("\nCongratulations! You won!")
        elif record.winner == Winner.COMPUTER:
            print("\nComputer wins! Better luck next time!")
        else:
            print("\nIt's a draw! Good game!")

        print(f"\nGame id: {record.id}")
        print(f"Finished: {record.finish_date_time}")
        print("\n" + "="*60)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe vs the computer")
    parser.add_argument(
        "--rounds",
        type=int,
        default=GameConfig.DEFAULT_NUM_ROUNDS,
        help="Number of rounds in the game"
    )
    parser.add_argument(
        "--human-token",
        default=GameConfig.HUMAN_TOKEN,
        help="Token the human plays with"
    )
    parser.add_argument(
        "--computer-token",
        default=GameConfig.COMPUTER_TOKEN,
        help="Token the computer plays with"
    )
    parser.add_argument(
        "--computer-first",
        action="store_true",
        help="Let the computer open the first round"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the computer's random moves"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print engine and service tracing"
    )

    args = parser.parse_args()

    if args.rounds < 1:
        parser.error("--rounds must be at least 1")
    if not is_valid_token(args.human_token) or not is_valid_token(args.computer_token):
        parser.error("--human-token and --computer-token must be non-empty")
    if args.human_token == args.computer_token:
        parser.error("--human-token and --computer-token must differ")

    session = TicTacToeSession(
        num_rounds=args.rounds,
        human_token=args.human_token,
        computer_token=args.computer_token,
        first_player=Side.COMPUTER if args.computer_first else Side.HUMAN,
        seed=args.seed,
        debug=True if args.debug else None
    )

    try:
        session.start()
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
