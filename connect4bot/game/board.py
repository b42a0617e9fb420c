"""
board.py - Board representation and core game mechanics for Connect Four

This module implements the Board class which holds the 7x6 grid, whose turn it
is and the two player identities. Moves arrive as free-form chat text; the
board extracts the column number, drops the current player's piece and reports
the outcome as a MoveResult.
"""

import re
from dataclasses import dataclass
from typing import Hashable, Optional, Tuple

import numpy as np

from connect4bot.debug import debug
from connect4bot.utils import (ROWS, COLS, Tile, Turn, MoveStatus,
                               COLUMN_FULL_REPLY, OUT_OF_BOUNDS_REPLY, ERROR_REPLY,
                               empty_grid, check_win, get_column_height,
                               render_board_glyphs)

COLUMN_PATTERN = re.compile(r"\d")


@dataclass(frozen=True)
class MoveResult:
    """Result of Board.apply_move; ``text`` is what gets sent back to the channel."""
    status: MoveStatus
    text: str
    column: Optional[int] = None
    row: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.status.accepted

    def __str__(self) -> str:
        return self.text


class Board:
    """
    Represents a Connect Four game board.

    The grid is stored column-major (``grid[column, row]``) with row 0 at the
    bottom, so a column's pieces always form a contiguous run from row 0.
    """

    def __init__(self, player_a: Hashable, player_b: Hashable):
        """
        Initialize an empty board for two players.

        Args:
            player_a: Identity of the initiator (plays first)
            player_b: Identity of the invited player
        """
        if player_a == player_b:
            raise ValueError("A board needs two distinct players")

        debug.debug(f"Initializing new Board for {player_a} vs {player_b}", "board")
        self._grid = empty_grid()
        self._players: Tuple[Hashable, Hashable] = (player_a, player_b)
        self.turn = Turn.ONE
        self.move_count = 0

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the grid."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    @property
    def players(self) -> Tuple[Hashable, Hashable]:
        return self._players

    def current_player(self) -> Hashable:
        """Identity of the player whose turn it is."""
        return self._players[self.turn.index]

    def tile_at(self, column: int, row: int) -> Tile:
        """Tile at a 0-indexed column and row (row 0 is the bottom)."""
        return Tile(int(self._grid[column, row]))

    def column_height(self, column: int) -> int:
        return get_column_height(self._grid, column)

    @staticmethod
    def parse_column(text: str) -> Optional[int]:
        """
        Extract the first decimal digit from a move text.

        Returns:
            The digit as an int (1-based column as typed), or None if there is none
        """
        match = COLUMN_PATTERN.search(text)
        if match is None:
            return None
        return int(match.group())

    def apply_move(self, text: str) -> MoveResult:
        """
        Place the current player's piece in the column named by ``text``.

        Grid and turn are only mutated when the piece is placed.

        Args:
            text: Free-form message text; the first digit selects the column (1-7)

        Returns:
            MoveResult with the rendered board on success, or a rejection reply
        """
        number = self.parse_column(text)
        if number is None:
            debug.debug(f"No column number in {text!r}", "board")
            return MoveResult(MoveStatus.ERROR, ERROR_REPLY)

        if not 0 < number <= COLS:
            debug.debug(f"Column {number} out of bounds", "board")
            return MoveResult(MoveStatus.OUT_OF_BOUNDS, OUT_OF_BOUNDS_REPLY)

        column = number - 1
        row = get_column_height(self._grid, column)
        if row >= ROWS:
            debug.debug(f"Column {number} is full", "board")
            return MoveResult(MoveStatus.COLUMN_FULL, COLUMN_FULL_REPLY)

        debug.trace(f"Placing {self.turn.name} at ({column}, {row})", "board")
        self._grid[column, row] = self.turn.tile.value
        self.turn = self.turn.other()
        self.move_count += 1

        return MoveResult(MoveStatus.PLACED, self.render(), column=column, row=row)

    def check_terminal(self) -> bool:
        """True if any four same-owner tiles line up in any direction."""
        return check_win(self._grid)

    def render(self) -> str:
        """Render the board as six lines of chat glyphs, top row first."""
        return render_board_glyphs(self._grid)

    def __str__(self) -> str:
        return self.render()
