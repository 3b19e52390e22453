"""
Game configuration for the tic-tac-toe round engine.
All the defaults for tokens, round count, and turn order.
"""


class GameConfig:
    """
    Configuration class for game settings.
    Change these values (or pass CLI flags in main.py) to tweak a session.
    """

    # ==================== BOARD SETTINGS ====================
    # TicTacToe is a 3x3 grid
    BOARD_SIZE = 3
    TOTAL_CELLS = BOARD_SIZE * BOARD_SIZE  # 9

    # ==================== GAME SETTINGS ====================
    # How many rounds make up one game
    DEFAULT_NUM_ROUNDS = 3

    # Tokens are opaque strings, only compared for equality
    HUMAN_TOKEN = "X"
    COMPUTER_TOKEN = "O"

    # ==================== TURN ORDER ====================
    # "human" or "computer"
    FIRST_PLAYER = "human"

    # Swap who opens each new round
    ALTERNATE_FIRST_PLAYER = True

    # ==================== DEBUG SETTINGS ====================
    DEBUG_MODE = False
