"""
Service module for the tic-tac-toe round engine.
Owns the game state and applies the moves and reports the engine asks for.
"""

from .move_validator import MoveValidator, ValidationResult
from .game_service import GameService
