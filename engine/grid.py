"""
Grid and shared game types for the tic-tac-toe round engine.
Tracks which token sits on each of the nine cells.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field

from .config import GameConfig


# A cell mark: None means empty, otherwise the owning token
Mark = Optional[str]

# (row, col), both 0-2
Location = Tuple[int, int]

EMPTY: Mark = None


class Side(Enum):
    """The two sides sitting at the board."""
    HUMAN = "human"
    COMPUTER = "computer"

    def opposite(self) -> "Side":
        """Get the other side."""
        return Side.COMPUTER if self == Side.HUMAN else Side.HUMAN


class Winner(Enum):
    """Outcome of a round or of a whole game."""
    HUMAN = "human"
    COMPUTER = "computer"
    DRAW = "draw"


class GameStateError(RuntimeError):
    """Raised when a result is queried before the round or game is over."""


def is_valid_location(location) -> bool:
    """Check that location is a (row, col) pair inside the board."""
    try:
        row, col = location
    except (TypeError, ValueError):
        return False

    size = GameConfig.BOARD_SIZE
    return (
        isinstance(row, int) and isinstance(col, int)
        and not isinstance(row, bool) and not isinstance(col, bool)
        and 0 <= row < size and 0 <= col < size
    )


def is_valid_token(token) -> bool:
    """Tokens must be non-empty strings so they never look like an empty cell."""
    return isinstance(token, str) and token != ""


@dataclass
class Grid:
    """
    The 3x3 board.

    Cells are indexed by (row, col). A mark, once placed, is never removed;
    a new round starts from a new Grid.
    """

    cells: List[List[Mark]] = field(
        default_factory=lambda: [
            [EMPTY for _ in range(GameConfig.BOARD_SIZE)] for _ in range(GameConfig.BOARD_SIZE)
        ]
    )

    def __post_init__(self):
        size = GameConfig.BOARD_SIZE
        if len(self.cells) != size or any(len(row) != size for row in self.cells):
            raise ValueError(f"Grid must be {size}x{size}, got {self.cells!r}")

    @classmethod
    def from_rows(cls, rows) -> "Grid":
        """Build a Grid from any 3x3 nested sequence (copied)."""
        return cls(cells=[list(row) for row in rows])

    def get(self, location: Location) -> Mark:
        """Get the mark at a location."""
        row, col = location
        return self.cells[row][col]

    def is_empty(self, location: Location) -> bool:
        return self.get(location) is EMPTY

    def get_empty_cells(self) -> List[Location]:
        """
        Get all empty cells on the board.

        Returns:
            List of (row, col) tuples in row-major order.
        """
        empty = []
        for row in range(GameConfig.BOARD_SIZE):
            for col in range(GameConfig.BOARD_SIZE):
                if self.cells[row][col] is EMPTY:
                    empty.append((row, col))
        return empty

    def filled_count(self) -> int:
        """Number of cells holding a token."""
        return sum(1 for row in self.cells for cell in row if cell is not EMPTY)

    def is_full(self) -> bool:
        return self.filled_count() == GameConfig.TOTAL_CELLS

    def place(self, location: Location, token: str):
        """
        Put a token on an empty cell.

        Args:
            location: (row, col) to mark.
            token: The token to place.

        Raises:
            ValueError: If the location or token is malformed, or the
                cell is already taken.
        """
        if not is_valid_location(location):
            raise ValueError(f"Invalid location {location!r}. Must be (0-2, 0-2).")
        if not is_valid_token(token):
            raise ValueError(f"Invalid token {token!r}")

        row, col = location
        if self.cells[row][col] is not EMPTY:
            raise ValueError(
                f"Cell ({row}, {col}) is already occupied by {self.cells[row][col]}"
            )

        self.cells[row][col] = token

    def copy(self) -> "Grid":
        """Create a deep copy of the grid."""
        return Grid(cells=[[cell for cell in row] for row in self.cells])

    def snapshot(self) -> Tuple[Tuple[Mark, ...], ...]:
        """Immutable copy of the cells, used for round history."""
        return tuple(tuple(row) for row in self.cells)

    def render(self) -> str:
        """Draw the board as text."""
        size = GameConfig.BOARD_SIZE
        lines = [
            "  " + "   ".join(str(col) for col in range(size)),
            "┌" + "┬".join(["───"] * size) + "┐",
        ]

        for row in range(size):
            row_str = "│"
            for col in range(size):
                mark = self.cells[row][col]
                # Tokens are opaque, show at most one character
                label = " " if mark is EMPTY else mark[0]
                row_str += f" {label} │"
            lines.append(f"{row} {row_str}")

            if row < size - 1:
                lines.append("├" + "┼".join(["───"] * size) + "┤")

        lines.append("└" + "┴".join(["───"] * size) + "┘")
        return "\n".join(lines)

    def print_board(self):
        """Print the board to console."""
        print("\n" + self.render())
