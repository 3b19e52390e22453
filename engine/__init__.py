"""
Engine module for the tic-tac-toe round engine.
Handles the grid, round and game rules, and the computer opponent.
"""

__version__ = "1.0.0"

from .config import GameConfig
from .grid import Grid, Location, Side, Winner, GameStateError
from .win_checker import WinChecker
from .round_engine import RoundEngine
from .computer_player import ComputerPlayer
from .game import Game, Round, GameRecord
from .game_aggregator import GameAggregator
from .orchestrator import Orchestrator, RegisterMove, ReportRound, ReportGame
