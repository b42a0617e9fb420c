"""
utils.py - Utility functions and constants for the Connect Four chat bot

This module provides common constants, enumerations, and helper functions
used by the board and the game session. The grid is column-major: it is
indexed ``grid[column, row]`` with row 0 at the bottom.
"""

from enum import Enum, auto
from typing import Dict

import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a line to win

# Glyphs used when rendering a board into a chat message
EMPTY_GLYPH = ":black_circle:"
PLAYER_ONE_GLYPH = ":red_circle:"
PLAYER_TWO_GLYPH = ":yellow_circle:"

# Replies for rejected moves
COLUMN_FULL_REPLY = "Column full"
OUT_OF_BOUNDS_REPLY = "Out of board limits!"
ERROR_REPLY = "Error"


class Tile(Enum):
    """Occupancy state of one cell."""
    EMPTY = 0
    ONE = 1    # Initiator's piece
    TWO = 2    # Invited player's piece

    @property
    def glyph(self) -> str:
        return TILE_GLYPHS[self]


TILE_GLYPHS: Dict[Tile, str] = {
    Tile.EMPTY: EMPTY_GLYPH,
    Tile.ONE: PLAYER_ONE_GLYPH,
    Tile.TWO: PLAYER_TWO_GLYPH,
}


class Turn(Enum):
    """Which of the two players may move next."""
    ONE = 1
    TWO = 2

    def other(self) -> 'Turn':
        """Get the other player's turn."""
        return Turn.TWO if self == Turn.ONE else Turn.ONE

    @property
    def tile(self) -> Tile:
        return Tile(self.value)

    @property
    def index(self) -> int:
        """Position of this player in the board's ``players`` pair."""
        return self.value - 1


class MoveStatus(Enum):
    """Outcome of applying a move text to a board."""
    PLACED = auto()
    COLUMN_FULL = auto()
    OUT_OF_BOUNDS = auto()
    ERROR = auto()

    @property
    def accepted(self) -> bool:
        return self == MoveStatus.PLACED


class Direction(Enum):
    """Enumeration representing directions for win checking."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()    # slope +1
    DIAGONAL_DOWN = auto()  # slope -1


# Direction vectors (column, row) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (1, 0),
    Direction.VERTICAL: (0, 1),
    Direction.DIAGONAL_UP: (1, 1),
    Direction.DIAGONAL_DOWN: (1, -1),
}


def empty_grid() -> np.ndarray:
    """Create an empty column-major grid."""
    return np.full((COLS, ROWS), Tile.EMPTY.value, dtype=np.int8)


def is_valid_position(col: int, row: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        col: Column index
        row: Row index

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= col < COLS and 0 <= row < ROWS


def get_column_height(grid: np.ndarray, column: int) -> int:
    """
    Get the number of pieces stacked in a column.

    Args:
        grid: The game grid
        column: The column to check (0-indexed)

    Returns:
        The number of pieces in the column
    """
    for row in range(ROWS):
        if grid[column, row] == Tile.EMPTY.value:
            return row
    return ROWS


def has_line_from(grid: np.ndarray, col: int, row: int, direction: Direction) -> bool:
    """Check for CONNECT_N identical non-empty tiles starting at (col, row)."""
    value = grid[col, row]
    if value == Tile.EMPTY.value:
        return False

    dc, dr = DIRECTION_VECTORS[direction]
    end_col = col + dc * (CONNECT_N - 1)
    end_row = row + dr * (CONNECT_N - 1)
    if not is_valid_position(end_col, end_row):
        return False

    return all(grid[col + dc * i, row + dr * i] == value for i in range(1, CONNECT_N))


def find_winning_line(grid: np.ndarray):
    """
    Scan the whole grid for a winning line.

    Returns:
        The (column, row) start and Direction of the first line found, or None
    """
    for col in range(COLS):
        for row in range(ROWS - 1, -1, -1):
            for direction in Direction:
                if has_line_from(grid, col, row, direction):
                    return (col, row), direction
    return None


def check_win(grid: np.ndarray) -> bool:
    """True if the grid contains CONNECT_N identical non-empty tiles in a line."""
    return find_winning_line(grid) is not None


def render_board_glyphs(grid: np.ndarray) -> str:
    """
    Render the grid as chat glyphs.

    Rows are printed top (row index ROWS - 1) first, each row left to right,
    glyphs concatenated with no separator and every row terminated by a newline.
    """
    lines = []
    for row in range(ROWS - 1, -1, -1):
        lines.append("".join(Tile(int(grid[col, row])).glyph for col in range(COLS)))
        lines.append("\n")
    return "".join(lines)
